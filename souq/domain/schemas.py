# souq/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# plain string, {"en": ..., "ar": ...} or absent
LocalizedText = Union[str, Dict[str, Optional[str]], None]


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# users


class UserCreate(CamelModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field("", max_length=100)
    email: str = Field(..., min_length=3, max_length=255)
    role: Literal["admin", "user"] = "user"


class UserRead(CamelModel):
    id: int
    first_name: str
    last_name: str
    email: str
    role: str


class CustomerOut(CamelModel):
    id: int
    first_name: str
    last_name: str
    email: str


# products


class OptionIn(CamelModel):
    sku: str = Field(..., min_length=1, max_length=100)
    price: float = Field(0, ge=0)
    price_after_discount: Optional[float] = Field(None, ge=0)
    stock: int = Field(0, ge=0)
    value: LocalizedText = None
    color_name: LocalizedText = None
    color_hex: Optional[str] = None
    storage: Optional[str] = None
    ram: Optional[str] = None
    variant_images: List[str] = Field(default_factory=list)


class VariantIn(CamelModel):
    name: LocalizedText = None
    options: List[OptionIn] = Field(default_factory=list)


class ProductCreate(CamelModel):
    name: Dict[str, Optional[str]]
    description: LocalizedText = None
    images: List[str] = Field(default_factory=list)
    variants: List[VariantIn] = Field(default_factory=list)


class ProductOut(CamelModel):
    id: int
    name: LocalizedText
    name_text: str = ""
    description: LocalizedText = None
    images: List[str]
    variants: List[VariantIn]
    created_at: datetime


# cart


class ItemIn(CamelModel):
    """Add a product variant to the caller's cart."""

    product_id: int = Field(..., gt=0)
    sku: str = Field(..., min_length=1)
    quantity: int = Field(1, gt=0)
    notes: Optional[str] = Field(None, max_length=500)


class QuantityIn(CamelModel):
    quantity: int = Field(..., gt=0)


class ItemNotesIn(CamelModel):
    notes: Optional[str] = Field(None, max_length=500)


class CartNotesIn(CamelModel):
    notes: Optional[Dict[str, Optional[str]]] = None


class DiscountIn(CamelModel):
    discount: Decimal = Field(..., ge=0, le=100)


class CartAdminUpdate(CamelModel):
    status: Optional[Literal["active", "abandoned", "converted"]] = None
    discount: Optional[Decimal] = Field(None, ge=0, le=100)
    notes: Optional[Dict[str, Optional[str]]] = None


class VariantInfoOut(CamelModel):
    label: Any = None
    color: Any = None
    color_hex: Optional[str] = None
    storage: Optional[str] = None
    ram: Optional[str] = None
    stock: Optional[int] = None
    type: Any = None


class EnrichedItemOut(CamelModel):
    id: int
    product_id: int
    product_name: LocalizedText = None
    product_name_text: str = ""
    sku: str
    quantity: int
    notes: Optional[str] = None
    price: Decimal
    total_price: Decimal
    variant: VariantInfoOut
    images: List[str]


class TotalsOut(CamelModel):
    total_items: int
    total_price_before_discount: Decimal
    discount_percent: Decimal
    discount_amount: Decimal
    total_price_after_discount: Decimal
    tax: Decimal
    display_total: Decimal


class CartOut(TotalsOut):
    id: int
    user_id: int
    customer: Optional[CustomerOut] = None
    status: str
    status_text: str
    notes: LocalizedText = None
    notes_text: str = ""
    items: List[EnrichedItemOut]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CartSummaryOut(CamelModel):
    total_carts: int
    total_active_carts: int
    total_items: int
    total_value: Optional[Decimal] = None
    average_cart_value: Optional[Decimal] = None


class CartListOut(CamelModel):
    carts: List[CartOut]
    summary: CartSummaryOut


class CartsOverviewOut(CamelModel):
    summary: CartSummaryOut
    recent_carts: List[CartOut]
    top_carts: List[CartOut]


class ProductStatOut(CamelModel):
    quantity: int
    revenue: Decimal


class UserActivityOut(CamelModel):
    carts: int
    total_value: Decimal


class CartAnalyticsOut(CamelModel):
    total_carts: int
    active_carts: int
    abandoned_carts: int
    converted_carts: int
    total_items: int
    total_value: Decimal
    average_cart_value: Decimal
    top_products: Dict[str, ProductStatOut]
    user_activity: Dict[str, UserActivityOut]
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class UserCartStatisticsOut(CamelModel):
    total_carts: int
    total_value: Decimal
    total_items: int
    average_cart_value: Decimal


class UserCartsOut(CamelModel):
    user: Optional[CustomerOut] = None
    carts: List[CartOut]
    statistics: UserCartStatisticsOut


class FixPricesOut(CamelModel):
    message: str
    updated_carts: int
    updated_items: int


# orders


class ShippingAddressIn(CamelModel):
    address: LocalizedText = None
    city: LocalizedText = None
    country: LocalizedText = None
    postal_code: Optional[str] = None
    phone: Optional[str] = None


class OrderCreate(CamelModel):
    """Checkout of the caller's cart."""

    shipping_address: Optional[ShippingAddressIn] = None
    payment_method: str = "cash"
    notes: Optional[str] = Field(None, max_length=1000)


class OrderStatusIn(CamelModel):
    status: str


class PaymentStatusIn(CamelModel):
    payment_status: str


class OrderNotesIn(CamelModel):
    notes: Optional[str] = Field(None, max_length=1000)


class OrderOut(TotalsOut):
    id: int
    user_id: int
    customer: Optional[CustomerOut] = None
    status: str
    status_text: str
    payment_method: str
    payment_method_text: str
    payment_status: str
    payment_status_text: str
    is_paid: bool
    paid_at: Optional[datetime] = None
    is_delivered: bool
    delivered_at: Optional[datetime] = None
    shipping_address: Dict[str, Any]
    shipping_address_text: str = ""
    notes: Optional[str] = None
    items: List[EnrichedItemOut]
    total_order_price: Decimal
    created_at: datetime


class OrderSummaryOut(CamelModel):
    total_orders: int
    total_revenue: Decimal


class UserOrdersOut(CamelModel):
    orders: List[OrderOut]
    summary: OrderSummaryOut


class MessageOut(CamelModel):
    message: str
