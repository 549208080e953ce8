# souq/services/price_repair.py
"""
Write-back of prices derived by the reconciler.

Reads never wait for it: ``PriceRepairService.schedule`` hands the corrections to
Celery and returns. Failures on either side end up in the log and nowhere else,
the next read simply derives the same prices again.
"""
from decimal import Decimal
from typing import Dict

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from souq.celery_worker import celery_app
from souq.data.database import SessionLocal
from souq.domain.pricing import ZERO, reconcile_price, resolve_variant, to_decimal
from souq.repos.cart_repo import CartRepo
from souq.utils.logging import get_logger
from souq.utils.retry import db_retry

logger = get_logger(__name__)


@db_retry()
def apply_item_prices(db: Session, cart_id: int, prices: Dict[int, Decimal]) -> int:
    """
    Store ``prices`` on the cart's items. A line that got a real price in the
    meantime is left alone. Returns the number of items written.
    """
    repo = CartRepo(db)
    try:
        updated = 0
        for item in repo.get_items_by_ids(cart_id, list(prices)):
            new_price = prices[item.id]
            if to_decimal(item.price) != ZERO or new_price <= ZERO:
                continue
            item.price = new_price
            updated += 1
        if updated:
            repo.commit()
        return updated
    except OperationalError:
        repo.rollback()
        raise


def fix_all_prices(db: Session) -> tuple[int, int]:
    """
    Synchronous bulk repair over every cart. Returns (updated_carts, updated_items).
    """
    repo = CartRepo(db)
    updated_carts = 0
    updated_items = 0

    for cart in repo.list_carts():
        cart_updated = False
        for item in cart.items:
            match = resolve_variant(item.product.variants if item.product else None, item.sku)
            resolution = reconcile_price(item.price, match)
            if resolution.was_corrected:
                item.price = resolution.price
                updated_items += 1
                cart_updated = True
        if cart_updated:
            repo.commit()
            updated_carts += 1

    logger.info(f"Price repair updated {updated_items} items in {updated_carts} carts")
    return updated_carts, updated_items


@celery_app.task(name="souq.services.price_repair.persist_item_prices_task")
def persist_item_prices_task(cart_id: int, prices: Dict[str, str]):
    """
    Celery task - ``prices`` maps item id to price, both as strings so the
    payload survives JSON serialization.
    """
    db = SessionLocal()
    try:
        updated = apply_item_prices(
            db, cart_id, {int(item_id): Decimal(price) for item_id, price in prices.items()}
        )
        logger.info(f"Cart {cart_id}: stored {updated} derived item prices")
        return {"cart_id": cart_id, "updated_items": updated}
    except Exception as e:
        logger.error(f"Error updating cart prices for cart {cart_id}: {e}")
        return {"cart_id": cart_id, "updated_items": 0, "error": str(e)}
    finally:
        db.close()


class PriceRepairService:
    """
    Fire-and-forget persistence of reconciled prices.
    """

    @staticmethod
    def schedule(cart_id: int, corrections: Dict[int, Decimal]) -> None:
        if not corrections:
            return
        payload = {str(item_id): str(price) for item_id, price in corrections.items()}
        try:
            persist_item_prices_task.delay(cart_id, payload)
        except Exception as e:
            logger.error(f"Could not dispatch price update for cart {cart_id}: {e}")
