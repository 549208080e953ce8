# souq/celery_worker.py
from celery import Celery

from souq.utils.settings import CELERY_BROKER_URL, CELERY_RESULT_BACKEND

celery_app = Celery(
    "souq",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# tasks live next to the services that dispatch them
celery_app.conf.imports = (
    "souq.services.price_repair",
    "souq.services.notification_service",
)

celery_app.conf.timezone = "UTC"
