# souq/repos/cart_repo.py
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from souq.data.models.cart import CartModel
from souq.data.models.cart_item import CartItemModel


def _with_items():
    return (
        selectinload(CartModel.items).selectinload(CartItemModel.product),
        selectinload(CartModel.user),
    )


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    # reads

    def get_cart(self, cart_id: int) -> CartModel | None:
        return self.db.execute(
            select(CartModel).where(CartModel.id == cart_id).options(*_with_items())
        ).scalar_one_or_none()

    def get_cart_by_user(self, user_id: int) -> CartModel | None:
        return self.db.execute(
            select(CartModel).where(CartModel.user_id == user_id).options(*_with_items())
        ).scalar_one_or_none()

    def list_carts(
        self,
        user_id: int | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[CartModel]:
        stmt = select(CartModel).options(*_with_items())
        if user_id is not None:
            stmt = stmt.where(CartModel.user_id == user_id)
        if start is not None:
            stmt = stmt.where(CartModel.created_at >= start)
        if end is not None:
            stmt = stmt.where(CartModel.created_at <= end)
        # newest first
        stmt = stmt.order_by(CartModel.created_at.desc(), CartModel.id.desc())
        return list(self.db.execute(stmt).scalars())

    def get_cart_item(self, cart_id: int, product_id: int, sku: str) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.product_id == product_id,
                CartItemModel.sku == sku,
            )
        ).scalar_one_or_none()

    def get_items_by_ids(self, cart_id: int, item_ids: list[int]) -> list[CartItemModel]:
        return list(
            self.db.execute(
                select(CartItemModel).where(
                    CartItemModel.cart_id == cart_id,
                    CartItemModel.id.in_(item_ids),
                )
            ).scalars()
        )

    # writes

    def create_cart(self, cart: CartModel) -> CartModel:
        self.db.add(cart)
        self.db.commit()
        self.db.refresh(cart)
        return cart

    def add_cart_item(self, item: CartItemModel) -> None:
        self.db.add(item)

    def delete_cart_item(self, item: CartItemModel) -> None:
        self.db.delete(item)

    def delete_cart(self, cart: CartModel) -> None:
        self.db.delete(cart)
        self.db.commit()

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()

    def refresh(self, cart: CartModel) -> CartModel:
        self.db.refresh(cart)
        return cart
