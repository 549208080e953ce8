# souq/main.py
from fastapi import FastAPI
import uvicorn

from souq.api.routers import carts, health, orders, products, users
from souq.data.database import Base, engine
from souq.utils.logging import get_logger

# every model has to be registered before create_all
import souq.data.models  # noqa: F401

logger = get_logger(__name__)

logger.info(f"Initializing database, tables: {sorted(Base.metadata.tables.keys())}")
try:
    Base.metadata.create_all(bind=engine)
except Exception as e:
    logger.error(f"Failed to create tables: {e}")
    raise


def create_app() -> FastAPI:
    app = FastAPI(
        title="Souq Admin API",
        version="1.0.0",
    )

    app.include_router(health.router)
    app.include_router(users.router, prefix="/api")
    app.include_router(products.router, prefix="/api")
    app.include_router(carts.router, prefix="/api")
    app.include_router(orders.router, prefix="/api")

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
