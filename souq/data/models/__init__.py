# every model imported here so Base.metadata knows all tables

from souq.data.models.user import UserModel
from souq.data.models.product import ProductModel
from souq.data.models.cart import CartModel
from souq.data.models.cart_item import CartItemModel
from souq.data.models.order import OrderModel
from souq.data.models.order_item import OrderItemModel

__all__ = [
    "UserModel",
    "ProductModel",
    "CartModel",
    "CartItemModel",
    "OrderModel",
    "OrderItemModel",
]
