# souq/services/notification_service.py
from souq.celery_worker import celery_app
from souq.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Customer notifications about order progress, sent through Celery.
    """

    @staticmethod
    def send_order_notification(user_id: int, order_id: int, status: str):
        try:
            send_order_notification_task.delay(user_id, order_id, status)
        except Exception as e:
            # the order change itself already happened
            logger.warning(f"Could not dispatch notification for order {order_id}: {e}")


@celery_app.task(name="souq.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: int, order_id: int, status: str):
    """
    Celery task - a real deployment would hand this to an email/SMS gateway.
    """
    logger.info(f"[NOTIFICATION] User {user_id}: order {order_id} is now {status}")
    return {"user_id": user_id, "order_id": order_id, "status": status, "sent": True}
