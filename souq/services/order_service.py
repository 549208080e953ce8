# souq/services/order_service.py
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from souq.data.models.order import OrderModel
from souq.data.models.order_item import OrderItemModel
from souq.domain import order_status
from souq.domain.errors import ForbiddenError, NotFoundError, ValidationError
from souq.domain.localization import PAYMENT_METHOD_LABELS, localize
from souq.domain.pricing import CENT, ZERO, aggregate_totals, reconcile_price, resolve_variant
from souq.repos.cart_repo import CartRepo
from souq.repos.order_repo import OrderRepo
from souq.services.enrichment import build_order_view
from souq.services.notification_service import NotificationService
from souq.utils.logging import get_logger

logger = get_logger(__name__)


def _has_en(value: Any) -> bool:
    return isinstance(value, dict) and bool(value.get("en"))


def validate_shipping_address(address: Dict[str, Any] | None) -> None:
    """English address, city and country plus a postal code are mandatory."""
    if (
        not address
        or not _has_en(address.get("address"))
        or not _has_en(address.get("city"))
        or not _has_en(address.get("country"))
        or not address.get("postal_code")
    ):
        raise ValidationError("Complete bilingual shipping address is required")


class OrderService:
    """
    Order domain: checkout from a cart, then the status/payment lifecycle.
    Item prices and quantities are frozen at checkout.
    """

    def __init__(self, db: Session, notification_service: NotificationService | None = None):
        self.db = db
        self.repo = OrderRepo(db)
        self.carts = CartRepo(db)
        self.notification_service = notification_service or NotificationService()

    def _require_order(self, order_id: int) -> OrderModel:
        order = self.repo.get_order(order_id)
        if not order:
            raise NotFoundError("Order not found")
        return order

    def _notify(self, order: OrderModel):
        self.notification_service.send_order_notification(order.user_id, order.id, order.status)

    def create_order_from_cart(
        self,
        user_id: int,
        shipping_address: Dict[str, Any] | None,
        payment_method: str,
        notes: str | None,
        lang: str,
    ) -> Dict[str, Any]:
        """
        1. cart must have items
        2. shipping address and payment method are validated
        3. every line must still resolve to a variant option, prices are frozen
        4. order is stored, then the cart is cleared and marked converted

        Steps 4a and 4b are separate commits: a failing cart clear leaves the
        order in place.
        """
        cart = self.carts.get_cart_by_user(user_id)
        if not cart or not cart.items:
            raise ValidationError("Your cart is empty")

        validate_shipping_address(shipping_address)

        if payment_method not in PAYMENT_METHOD_LABELS:
            raise ValidationError(f"Invalid payment method: {payment_method}")

        items = []
        for item in cart.items:
            product = item.product
            match = resolve_variant(product.variants if product else None, item.sku)
            if match is None:
                name = localize(product.name if product else None, "en", fallback=str(item.product_id))
                raise ValidationError(f"Invalid SKU ({item.sku}) for product {name}")

            resolution = reconcile_price(item.price, match)
            items.append(
                OrderItemModel(
                    product_id=item.product_id,
                    sku=item.sku,
                    quantity=item.quantity,
                    price=resolution.price,
                )
            )

        totals = aggregate_totals([(i.price, i.quantity) for i in items], cart.discount)

        order = OrderModel(
            user_id=user_id,
            status=order_status.PENDING,
            payment_method=payment_method,
            payment_status="pending",
            shipping_address=shipping_address,
            notes=notes,
            discount_percent=totals.discount_percent,
            total_order_price=totals.total_price_after_discount.quantize(CENT),
            items=items,
        )
        created = self.repo.create_order(order)
        logger.info(f"Order {created.id} created from cart {cart.id}, total {created.total_order_price}")

        try:
            cart.items.clear()
            cart.discount = 0
            cart.status = "converted"
            self.carts.commit()
        except Exception as e:
            logger.error(f"Order {created.id} stored but cart {cart.id} was not cleared: {e}")
            raise

        self._notify(created)
        return build_order_view(self._require_order(created.id), lang)

    # queries

    def get_order(self, order_id: int, user_id: int, is_admin: bool, lang: str) -> Dict[str, Any]:
        order = self._require_order(order_id)
        if order.user_id != user_id and not is_admin:
            raise ForbiddenError("Not authorized to access this order")
        return build_order_view(order, lang)

    def list_user_orders(self, user_id: int, lang: str) -> List[Dict[str, Any]]:
        return [build_order_view(o, lang) for o in self.repo.list_orders(user_id=user_id)]

    def list_orders(
        self,
        lang: str,
        status: str | None = None,
        payment_status: str | None = None,
        search: str | None = None,
    ) -> List[Dict[str, Any]]:
        orders = self.repo.list_orders(status=status, payment_status=payment_status)
        views = [build_order_view(o, lang) for o in orders]
        if not search:
            return views

        term = search.strip().lower()

        def matches(view):
            customer = view["customer"] or {}
            full_name = f"{customer.get('first_name', '')} {customer.get('last_name', '')}".lower()
            names = " ".join(i["product_name_text"] for i in view["items"]).lower()
            return term in full_name or term in (customer.get("email") or "").lower() or term in names

        return [v for v in views if matches(v)]

    def orders_by_user(self, user_id: int, lang: str) -> Dict[str, Any]:
        orders = self.repo.list_orders(user_id=user_id)
        return {
            "orders": [build_order_view(o, lang) for o in orders],
            "summary": {
                "total_orders": len(orders),
                "total_revenue": sum((o.total_order_price for o in orders), ZERO),
            },
        }

    # commands

    def update_status(self, order_id: int, status: str, lang: str) -> Dict[str, Any]:
        order = self._require_order(order_id)
        previous = order.status
        order_status.set_status(order, status)
        self.repo.save(order)
        logger.info(f"Order {order.id}: status {previous} -> {order.status}")
        if previous != order.status:
            self._notify(order)
        return build_order_view(order, lang)

    def mark_paid(self, order_id: int, lang: str) -> Dict[str, Any]:
        order = self._require_order(order_id)
        previous = order.status
        order_status.apply_payment_status(order, "paid")
        self.repo.save(order)
        logger.info(f"Order {order.id} marked paid")
        if previous != order.status:
            self._notify(order)
        return build_order_view(order, lang)

    def mark_delivered(self, order_id: int, lang: str) -> Dict[str, Any]:
        return self.update_status(order_id, order_status.DELIVERED, lang)

    def update_payment_status(self, order_id: int, payment_status: str, lang: str) -> Dict[str, Any]:
        order = self._require_order(order_id)
        previous = order.status
        order_status.apply_payment_status(order, payment_status)
        self.repo.save(order)
        logger.info(f"Order {order.id}: payment status {payment_status}")
        if previous != order.status:
            self._notify(order)
        return build_order_view(order, lang)

    def cancel_order(self, order_id: int, user_id: int) -> None:
        order = self._require_order(order_id)
        if order.user_id != user_id:
            raise ForbiddenError("Not authorized to cancel this order")

        order_status.set_status(order, order_status.CANCELLED)
        self.repo.save(order)
        logger.info(f"Order {order.id} cancelled by user {user_id}")
        self._notify(order)

    def update_notes(self, order_id: int, user_id: int, is_admin: bool, notes: str | None, lang: str) -> Dict[str, Any]:
        order = self._require_order(order_id)
        if order.user_id != user_id and not is_admin:
            raise ForbiddenError("Not authorized to update this order")
        order.notes = notes
        self.repo.save(order)
        return build_order_view(order, lang)

    def delete_order(self, order_id: int) -> None:
        order = self._require_order(order_id)
        self.repo.delete_order(order)
        logger.info(f"Order {order_id} deleted")
