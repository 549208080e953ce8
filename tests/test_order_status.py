from types import SimpleNamespace

import pytest

from souq.domain.errors import InvalidStateError, ValidationError
from souq.domain.order_status import apply_payment_status, check_transition, set_status


def order(status="pending", payment_status="pending"):
    return SimpleNamespace(
        status=status,
        payment_status=payment_status,
        is_paid=False,
        paid_at=None,
        is_delivered=False,
        delivered_at=None,
    )


@pytest.mark.parametrize(
    "current, target",
    [
        ("pending", "processing"),
        ("pending", "shipped"),
        ("pending", "delivered"),
        ("processing", "delivered"),
        ("shipped", "delivered"),
        ("pending", "cancelled"),
    ],
)
def test_allowed_transitions(current, target):
    check_transition(current, target)


@pytest.mark.parametrize(
    "current, target",
    [
        ("processing", "cancelled"),
        ("shipped", "cancelled"),
        ("delivered", "processing"),
        ("cancelled", "pending"),
        ("shipped", "processing"),
    ],
)
def test_rejected_transitions(current, target):
    with pytest.raises(InvalidStateError):
        check_transition(current, target)


def test_unknown_status():
    with pytest.raises(ValidationError):
        check_transition("pending", "lost")


def test_cancel_pending():
    o = order()
    set_status(o, "cancelled")
    assert o.status == "cancelled"


def test_deliver_sets_timestamp():
    o = order("shipped")
    set_status(o, "delivered")
    assert o.is_delivered is True
    assert o.delivered_at is not None


def test_paid_moves_pending_to_processing():
    o = order()
    apply_payment_status(o, "paid")
    assert (o.payment_status, o.is_paid, o.status) == ("paid", True, "processing")
    assert o.paid_at is not None


def test_paid_does_not_move_shipped_order_back():
    o = order("shipped")
    apply_payment_status(o, "paid")
    assert o.status == "shipped"
    assert o.is_paid is True


def test_failed_payment_keeps_status():
    o = order()
    apply_payment_status(o, "failed")
    assert (o.payment_status, o.is_paid, o.status) == ("failed", False, "pending")


def test_cannot_pay_cancelled_order():
    o = order("cancelled")
    with pytest.raises(InvalidStateError):
        apply_payment_status(o, "paid")
    assert o.payment_status == "pending"


def test_invalid_payment_status():
    with pytest.raises(ValidationError):
        apply_payment_status(order(), "maybe")


def test_cancelling_twice_is_rejected():
    o = order("cancelled")
    with pytest.raises(InvalidStateError):
        set_status(o, "cancelled")


def test_same_status_is_a_no_op():
    o = order("processing")
    set_status(o, "processing")
    assert o.status == "processing"


@pytest.mark.parametrize("payment_status", ["failed", "refunded", "pending"])
def test_leaving_paid_clears_paid_flag(payment_status):
    o = order()
    apply_payment_status(o, "paid")
    apply_payment_status(o, payment_status)
    assert (o.payment_status, o.is_paid, o.paid_at) == (payment_status, False, None)
    assert o.status == "processing"
