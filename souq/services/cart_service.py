# souq/services/cart_service.py
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from souq.data.models.cart import CartModel
from souq.data.models.cart_item import CartItemModel
from souq.domain.errors import NotFoundError, ValidationError
from souq.domain.localization import localize
from souq.domain.pricing import ZERO, option_price, resolve_variant
from souq.repos.cart_repo import CartRepo
from souq.repos.product_repo import ProductRepo
from souq.services.enrichment import build_cart_view
from souq.services.price_repair import PriceRepairService, fix_all_prices
from souq.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Cart use cases. Commands (add, remove, update, clear, discount) change
    the caller's cart, queries return it reconciled and priced.
    Admin queries work across all carts.
    """

    def __init__(self, db: Session, price_repair: PriceRepairService):
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)
        self.price_repair = price_repair

    def _view(self, cart: CartModel, lang: str) -> Dict[str, Any]:
        view, corrections = build_cart_view(cart, lang)
        if corrections:
            logger.info(f"Cart {cart.id}: derived prices for {len(corrections)} items, scheduling write-back")
            self.price_repair.schedule(cart.id, corrections)
        return view

    def _views(self, carts: List[CartModel], lang: str) -> List[Dict[str, Any]]:
        return [self._view(cart, lang) for cart in carts]

    def _get_or_create(self, user_id: int) -> CartModel:
        cart = self.repo.get_cart_by_user(user_id)
        if cart:
            return cart
        created = self.repo.create_cart(CartModel(user_id=user_id, status="active", discount=0))
        logger.info(f"Created cart {created.id} for user {user_id}")
        return created

    def _require_cart(self, user_id: int) -> CartModel:
        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            raise NotFoundError("Cart not found")
        return cart

    def _require_item(self, cart: CartModel, product_id: int, sku: str) -> CartItemModel:
        for item in cart.items:
            if item.product_id == product_id and item.sku == sku:
                return item
        raise NotFoundError("Item not found in cart")

    def _save(self, cart: CartModel, lang: str) -> Dict[str, Any]:
        self.repo.commit()
        self.repo.refresh(cart)
        return self._view(cart, lang)

    # query

    def get_cart(self, user_id: int, lang: str) -> Dict[str, Any]:
        return self._view(self._get_or_create(user_id), lang)

    # commands

    def add_item(
        self,
        user_id: int,
        product_id: int,
        sku: str,
        quantity: int,
        notes: str | None,
        lang: str,
    ) -> Dict[str, Any]:
        if quantity <= 0:
            raise ValidationError("Quantity must be greater than 0")

        product = self.products.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")

        match = resolve_variant(product.variants, sku)
        if match is None:
            raise ValidationError(f"Invalid SKU ({sku}) for product {localize(product.name, 'en')}")

        # price is captured now, later reads treat it as authoritative
        price = option_price(match.option)

        cart = self._get_or_create(user_id)
        if cart.status != "active":
            logger.info(f"Reopening {cart.status} cart {cart.id}")
            cart.status = "active"

        existing = self.repo.get_cart_item(cart.id, product_id, sku)
        if existing:
            logger.info(
                f"SKU {sku} already in cart {cart.id}, quantity "
                f"{existing.quantity} -> {existing.quantity + quantity}"
            )
            existing.quantity += quantity
            existing.price = price
            if notes is not None:
                existing.notes = notes
        else:
            logger.info(f"Adding SKU {sku} of product {product_id} to cart {cart.id}")
            self.repo.add_cart_item(
                CartItemModel(
                    cart_id=cart.id,
                    product_id=product_id,
                    sku=sku,
                    quantity=quantity,
                    price=price,
                    notes=notes,
                )
            )

        return self._save(cart, lang)

    def remove_item(self, user_id: int, product_id: int, sku: str, lang: str) -> Dict[str, Any]:
        cart = self._require_cart(user_id)
        item = self._require_item(cart, product_id, sku)

        cart.items.remove(item)
        logger.info(f"Removed SKU {sku} from cart {cart.id}")
        return self._save(cart, lang)

    def update_quantity(self, user_id: int, product_id: int, sku: str, quantity: int, lang: str) -> Dict[str, Any]:
        if quantity <= 0:
            raise ValidationError("Quantity must be greater than 0")

        cart = self._require_cart(user_id)
        item = self._require_item(cart, product_id, sku)
        item.quantity = quantity
        return self._save(cart, lang)

    def update_item_notes(self, user_id: int, product_id: int, sku: str, notes: str | None, lang: str) -> Dict[str, Any]:
        cart = self._require_cart(user_id)
        item = self._require_item(cart, product_id, sku)
        item.notes = notes
        return self._save(cart, lang)

    def update_notes(self, user_id: int, notes: Dict[str, Any] | None, lang: str) -> Dict[str, Any]:
        cart = self._get_or_create(user_id)
        cart.notes = notes
        return self._save(cart, lang)

    def apply_discount(self, user_id: int, discount: Decimal, lang: str) -> Dict[str, Any]:
        if discount < 0 or discount > 100:
            raise ValidationError("Discount must be between 0 and 100")

        cart = self._get_or_create(user_id)
        cart.discount = discount
        logger.info(f"Cart {cart.id}: discount set to {discount}%")
        return self._save(cart, lang)

    def clear_cart(self, user_id: int, lang: str) -> Dict[str, Any]:
        cart = self._get_or_create(user_id)
        cart.items.clear()
        logger.info(f"Cleared cart {cart.id}")
        return self._save(cart, lang)

    # admin

    @staticmethod
    def _summary(views: List[Dict[str, Any]]) -> Dict[str, Any]:
        return {
            "total_carts": len(views),
            "total_active_carts": sum(1 for v in views if v["items"]),
            "total_items": sum(v["total_items"] for v in views),
        }

    def list_carts(self, lang: str) -> Dict[str, Any]:
        views = self._views(self.repo.list_carts(), lang)
        return {"carts": views, "summary": self._summary(views)}

    def carts_summary(self, lang: str) -> Dict[str, Any]:
        views = self._views(self.repo.list_carts(), lang)
        total_value = sum((v["total_price_after_discount"] for v in views), ZERO)
        summary = self._summary(views)
        summary["total_value"] = total_value
        summary["average_cart_value"] = total_value / len(views) if views else ZERO

        return {
            "summary": summary,
            "recent_carts": views[:5],
            "top_carts": sorted(views, key=lambda v: v["total_price_after_discount"], reverse=True)[:3],
        }

    def carts_by_user(self, user_id: int, lang: str) -> Dict[str, Any]:
        views = self._views(self.repo.list_carts(user_id=user_id), lang)
        total_value = sum((v["total_price_after_discount"] for v in views), ZERO)
        total_items = sum(v["total_items"] for v in views)

        return {
            "user": views[0]["customer"] if views else None,
            "carts": views,
            "statistics": {
                "total_carts": len(views),
                "total_value": total_value,
                "total_items": total_items,
                "average_cart_value": total_value / len(views) if views else ZERO,
            },
        }

    def analytics(self, start: datetime | None, end: datetime | None, lang: str) -> Dict[str, Any]:
        carts = self.repo.list_carts(start=start, end=end)
        views = self._views(carts, lang)

        total_value = sum((v["total_price_after_discount"] for v in views), ZERO)
        top_products: Dict[str, Dict[str, Any]] = {}
        user_activity: Dict[str, Dict[str, Any]] = {}

        for cart, view in zip(carts, views):
            for item in view["items"]:
                name = localize(item["product_name"], "en", fallback="Unknown Product")
                stat = top_products.setdefault(name, {"quantity": 0, "revenue": ZERO})
                stat["quantity"] += item["quantity"]
                stat["revenue"] += item["total_price"]

            user_name = cart.user.full_name if cart.user else ""
            activity = user_activity.setdefault(user_name or "Unknown User", {"carts": 0, "total_value": ZERO})
            activity["carts"] += 1
            activity["total_value"] += view["total_price_after_discount"]

        return {
            "total_carts": len(views),
            "active_carts": sum(1 for c in carts if c.status == "active"),
            "abandoned_carts": sum(1 for c in carts if c.status == "abandoned"),
            "converted_carts": sum(1 for c in carts if c.status == "converted"),
            "total_items": sum(v["total_items"] for v in views),
            "total_value": total_value,
            "average_cart_value": total_value / len(views) if views else ZERO,
            "top_products": top_products,
            "user_activity": user_activity,
            "start_date": start,
            "end_date": end,
        }

    def fix_prices(self) -> Dict[str, Any]:
        updated_carts, updated_items = fix_all_prices(self.repo.db)
        return {
            "message": f"Updated {updated_items} items in {updated_carts} carts",
            "updated_carts": updated_carts,
            "updated_items": updated_items,
        }

    def update_cart(self, cart_id: int, changes: Dict[str, Any], lang: str) -> Dict[str, Any]:
        cart = self.repo.get_cart(cart_id)
        if not cart:
            raise NotFoundError("Cart not found")

        if changes.get("discount") is not None:
            discount = changes["discount"]
            if discount < 0 or discount > 100:
                raise ValidationError("Discount must be between 0 and 100")
            cart.discount = discount
        if changes.get("status") is not None:
            cart.status = changes["status"]
        if "notes" in changes:
            cart.notes = changes["notes"]

        logger.info(f"Admin updated cart {cart.id}: {sorted(changes)}")
        return self._save(cart, lang)

    def delete_cart(self, cart_id: int) -> None:
        cart = self.repo.get_cart(cart_id)
        if not cart:
            raise NotFoundError("Cart not found")
        self.repo.delete_cart(cart)
        logger.info(f"Deleted cart {cart_id}")
