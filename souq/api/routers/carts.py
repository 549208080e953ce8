# souq/api/routers/carts.py
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from souq.api.deps import get_current_user, get_language, require_admin
from souq.data.database import get_db
from souq.data.models.user import UserModel
from souq.domain.errors import NotFoundError
from souq.domain.schemas import (
    CartAdminUpdate,
    CartAnalyticsOut,
    CartListOut,
    CartNotesIn,
    CartOut,
    CartsOverviewOut,
    DiscountIn,
    FixPricesOut,
    ItemIn,
    ItemNotesIn,
    QuantityIn,
    UserCartsOut,
)
from souq.services.cart_service import CartService
from souq.services.price_repair import PriceRepairService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(db=db, price_repair=PriceRepairService())


# admin routes go first so /admin/... never reaches the item routes

@router.get("/admin", response_model=CartListOut, dependencies=[Depends(require_admin)])
def list_carts(lang: str = Depends(get_language), db: Session = Depends(get_db)):
    return get_service(db).list_carts(lang)


@router.get("/admin/summary", response_model=CartsOverviewOut, dependencies=[Depends(require_admin)])
def carts_summary(lang: str = Depends(get_language), db: Session = Depends(get_db)):
    return get_service(db).carts_summary(lang)


@router.get("/admin/analytics", response_model=CartAnalyticsOut, dependencies=[Depends(require_admin)])
def cart_analytics(
    start_date: datetime | None = Query(None, alias="startDate"),
    end_date: datetime | None = Query(None, alias="endDate"),
    lang: str = Depends(get_language),
    db: Session = Depends(get_db),
):
    return get_service(db).analytics(start_date, end_date, lang)


@router.get("/admin/users/{user_id}", response_model=UserCartsOut, dependencies=[Depends(require_admin)])
def carts_by_user(user_id: int, lang: str = Depends(get_language), db: Session = Depends(get_db)):
    return get_service(db).carts_by_user(user_id, lang)


@router.post("/admin/fix-prices", response_model=FixPricesOut, dependencies=[Depends(require_admin)])
def fix_cart_prices(db: Session = Depends(get_db)):
    """
    Stores the variant-derived price on every line that has none.
    """
    return get_service(db).fix_prices()


@router.patch("/admin/{cart_id}", response_model=CartOut, dependencies=[Depends(require_admin)])
def update_cart(
    cart_id: int,
    payload: CartAdminUpdate,
    lang: str = Depends(get_language),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.update_cart(cart_id, payload.model_dump(exclude_unset=True), lang)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/admin/{cart_id}", status_code=204, dependencies=[Depends(require_admin)])
def delete_cart(cart_id: int, db: Session = Depends(get_db)):
    try:
        get_service(db).delete_cart(cart_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=204)


# caller's own cart

@router.get("", response_model=CartOut)
def get_cart(
    user: UserModel = Depends(get_current_user),
    lang: str = Depends(get_language),
    db: Session = Depends(get_db),
):
    return get_service(db).get_cart(user.id, lang)


@router.post("", response_model=CartOut)
def add_to_cart(
    payload: ItemIn,
    user: UserModel = Depends(get_current_user),
    lang: str = Depends(get_language),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.add_item(
            user_id=user.id,
            product_id=payload.product_id,
            sku=payload.sku,
            quantity=payload.quantity,
            notes=payload.notes,
            lang=lang,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("", response_model=CartOut)
def clear_cart(
    user: UserModel = Depends(get_current_user),
    lang: str = Depends(get_language),
    db: Session = Depends(get_db),
):
    return get_service(db).clear_cart(user.id, lang)


@router.patch("/notes", response_model=CartOut)
def update_cart_notes(
    payload: CartNotesIn,
    user: UserModel = Depends(get_current_user),
    lang: str = Depends(get_language),
    db: Session = Depends(get_db),
):
    return get_service(db).update_notes(user.id, payload.notes, lang)


@router.patch("/discount", response_model=CartOut)
def apply_discount(
    payload: DiscountIn,
    user: UserModel = Depends(get_current_user),
    lang: str = Depends(get_language),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.apply_discount(user.id, payload.discount, lang)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{product_id}/{sku}", response_model=CartOut)
def remove_from_cart(
    product_id: int,
    sku: str,
    user: UserModel = Depends(get_current_user),
    lang: str = Depends(get_language),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.remove_item(user.id, product_id, sku, lang)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/{product_id}/{sku}", response_model=CartOut)
def update_cart_item_quantity(
    product_id: int,
    sku: str,
    payload: QuantityIn,
    user: UserModel = Depends(get_current_user),
    lang: str = Depends(get_language),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.update_quantity(user.id, product_id, sku, payload.quantity, lang)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.patch("/{product_id}/{sku}/notes", response_model=CartOut)
def update_cart_item_notes(
    product_id: int,
    sku: str,
    payload: ItemNotesIn,
    user: UserModel = Depends(get_current_user),
    lang: str = Depends(get_language),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.update_item_notes(user.id, product_id, sku, payload.notes, lang)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
