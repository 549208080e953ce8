# souq/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from souq.api.deps import get_current_user, get_language, require_admin
from souq.data.database import get_db
from souq.data.models.user import UserModel
from souq.domain.errors import NotFoundError
from souq.domain.schemas import (
    MessageOut,
    OrderCreate,
    OrderNotesIn,
    OrderOut,
    OrderStatusIn,
    PaymentStatusIn,
    UserOrdersOut,
)
from souq.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session):
    return OrderService(db)


@router.post("", response_model=OrderOut, status_code=201)
def create_order(
    payload: OrderCreate,
    user: UserModel = Depends(get_current_user),
    lang: str = Depends(get_language),
    db: Session = Depends(get_db),
):
    """
    Checkout: turns the caller's cart into a pending order and empties the cart.
    """
    svc = get_service(db)
    address = payload.shipping_address.model_dump() if payload.shipping_address else None
    try:
        return svc.create_order_from_cart(user.id, address, payload.payment_method, payload.notes, lang)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("", response_model=List[OrderOut], dependencies=[Depends(require_admin)])
def list_orders(
    status: str | None = Query(None),
    payment_status: str | None = Query(None, alias="paymentStatus"),
    search: str | None = Query(None),
    lang: str = Depends(get_language),
    db: Session = Depends(get_db),
):
    return get_service(db).list_orders(lang, status=status, payment_status=payment_status, search=search)


@router.get("/mine", response_model=List[OrderOut])
def my_orders(
    user: UserModel = Depends(get_current_user),
    lang: str = Depends(get_language),
    db: Session = Depends(get_db),
):
    return get_service(db).list_user_orders(user.id, lang)


@router.get("/user/{user_id}", response_model=UserOrdersOut, dependencies=[Depends(require_admin)])
def orders_by_user(user_id: int, lang: str = Depends(get_language), db: Session = Depends(get_db)):
    return get_service(db).orders_by_user(user_id, lang)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    user: UserModel = Depends(get_current_user),
    lang: str = Depends(get_language),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.get_order(order_id, user.id, user.role == "admin", lang)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{order_id}/status", response_model=OrderOut, dependencies=[Depends(require_admin)])
def update_order_status(
    order_id: int,
    payload: OrderStatusIn,
    lang: str = Depends(get_language),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.update_status(order_id, payload.status, lang)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/{order_id}/pay", response_model=OrderOut, dependencies=[Depends(require_admin)])
def mark_order_paid(order_id: int, lang: str = Depends(get_language), db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.mark_paid(order_id, lang)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/{order_id}/deliver", response_model=OrderOut, dependencies=[Depends(require_admin)])
def mark_order_delivered(order_id: int, lang: str = Depends(get_language), db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.mark_delivered(order_id, lang)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/{order_id}/payment-status", response_model=OrderOut, dependencies=[Depends(require_admin)])
def update_payment_status(
    order_id: int,
    payload: PaymentStatusIn,
    lang: str = Depends(get_language),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.update_payment_status(order_id, payload.payment_status, lang)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/{order_id}/cancel", response_model=MessageOut)
def cancel_order(
    order_id: int,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        svc.cancel_order(order_id, user.id)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"message": "Order cancelled successfully"}


@router.patch("/{order_id}/notes", response_model=OrderOut)
def update_order_notes(
    order_id: int,
    payload: OrderNotesIn,
    user: UserModel = Depends(get_current_user),
    lang: str = Depends(get_language),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.update_notes(order_id, user.id, user.role == "admin", payload.notes, lang)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{order_id}", status_code=204, dependencies=[Depends(require_admin)])
def delete_order(order_id: int, db: Session = Depends(get_db)):
    try:
        get_service(db).delete_order(order_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=204)
