# souq/domain/order_status.py
from datetime import datetime, timezone

from souq.domain.errors import InvalidStateError, ValidationError

PENDING = "pending"
PROCESSING = "processing"
SHIPPED = "shipped"
DELIVERED = "delivered"
CANCELLED = "cancelled"

ORDER_STATUSES = (PENDING, PROCESSING, SHIPPED, DELIVERED, CANCELLED)
TERMINAL_STATUSES = frozenset({DELIVERED, CANCELLED})
PAYMENT_STATUSES = ("pending", "paid", "failed", "refunded")

# forward order of the fulfilment track; cancelled sits outside it
_RANK = {PENDING: 0, PROCESSING: 1, SHIPPED: 2, DELIVERED: 3}


def check_transition(current: str, target: str) -> None:
    """
    Raise unless ``current -> target`` is allowed.

    Any forward jump along pending -> processing -> shipped -> delivered is
    fine, cancellation only from pending, nothing leaves delivered/cancelled.
    """
    if target not in ORDER_STATUSES:
        raise ValidationError(f"Invalid order status: {target}")

    if current in TERMINAL_STATUSES:
        raise InvalidStateError(f"Order is already {current}")

    if target == CANCELLED:
        if current != PENDING:
            raise InvalidStateError("Can only cancel pending orders")
        return

    if _RANK[target] < _RANK[current]:
        raise InvalidStateError(f"Cannot move order from {current} back to {target}")


def set_status(order, target: str) -> None:
    if target == order.status and target not in TERMINAL_STATUSES:
        return
    check_transition(order.status, target)
    order.status = target
    if target == DELIVERED:
        order.is_delivered = True
        order.delivered_at = datetime.now(timezone.utc)


def apply_payment_status(order, payment_status: str) -> None:
    """
    Update the payment sub-state. ``paid`` marks the order paid and moves a
    pending order to processing in the same mutation, any other value clears
    ``is_paid`` and ``paid_at``.
    """
    if payment_status not in PAYMENT_STATUSES:
        raise ValidationError("Invalid payment status")

    if payment_status == "paid":
        if order.status in TERMINAL_STATUSES:
            raise InvalidStateError(f"Cannot mark a {order.status} order as paid")
        if order.status == PENDING:
            order.status = PROCESSING
        order.is_paid = True
        order.paid_at = datetime.now(timezone.utc)
    else:
        # leaving paid (failed, refunded, back to pending) clears the paid flag
        order.is_paid = False
        order.paid_at = None

    order.payment_status = payment_status
