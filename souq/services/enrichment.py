# souq/services/enrichment.py
"""
Builds the outward cart/order shapes: each line is matched to its variant
option by SKU and decorated with variant info. Cart lines are priced through
the reconciler, order lines keep the price frozen at checkout.
"""
from decimal import Decimal
from typing import Any, Dict, List, Tuple

from souq.domain.localization import (
    CART_STATUS_LABELS,
    ORDER_STATUS_LABELS,
    PAYMENT_METHOD_LABELS,
    PAYMENT_STATUS_LABELS,
    label,
    localize,
)
from souq.domain.pricing import (
    PriceResolution,
    Totals,
    aggregate_totals,
    display_total,
    reconcile_price,
    resolve_variant,
    tax_amount,
    to_decimal,
)


def customer_of(user) -> Dict[str, Any] | None:
    if user is None:
        return None
    return {
        "id": user.id,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "email": user.email,
    }


def enrich_item(item, lang: str, reconcile: bool = True) -> Tuple[Dict[str, Any], PriceResolution]:
    """
    Works for both cart and order lines (product, sku, quantity, price).
    With ``reconcile=False`` the stored price is used as is and the variant
    only supplies the decoration.
    """
    product = item.product
    match = resolve_variant(product.variants if product else None, item.sku)
    if reconcile:
        resolution = reconcile_price(item.price, match)
    else:
        resolution = PriceResolution(price=to_decimal(item.price), was_corrected=False)

    option = match.option if match else {}
    group = match.group if match else {}
    variant_images = option.get("variant_images") or []
    product_images = (product.images if product else None) or []

    enriched = {
        "id": item.id,
        "product_id": item.product_id,
        "product_name": product.name if product else None,
        "product_name_text": localize(product.name if product else None, lang),
        "sku": item.sku,
        "quantity": item.quantity,
        "notes": getattr(item, "notes", None),
        "price": resolution.price,
        "total_price": resolution.price * item.quantity,
        "variant": {
            "label": option.get("value"),
            "color": option.get("color_name"),
            "color_hex": option.get("color_hex"),
            "storage": option.get("storage"),
            "ram": option.get("ram"),
            "stock": option.get("stock"),
            "type": group.get("name"),
        },
        "images": variant_images if variant_images else product_images,
    }
    return enriched, resolution


def enrich_lines(items, lang: str, reconcile: bool = True) -> Tuple[List[Dict[str, Any]], List[Tuple[Decimal, int]], Dict[int, Decimal]]:
    """
    Returns enriched items, ``(price, quantity)`` lines for the aggregator and
    ``{item_id: price}`` for every line whose price was derived from its variant.
    """
    enriched_items = []
    lines = []
    corrections = {}
    for item in items:
        enriched, resolution = enrich_item(item, lang, reconcile)
        enriched_items.append(enriched)
        lines.append((resolution.price, item.quantity))
        if resolution.was_corrected:
            corrections[item.id] = resolution.price
    return enriched_items, lines, corrections


def totals_view(totals: Totals) -> Dict[str, Any]:
    return {
        "total_items": totals.total_items,
        "total_price_before_discount": totals.total_price_before_discount,
        "discount_percent": totals.discount_percent,
        "discount_amount": totals.discount_amount,
        "total_price_after_discount": totals.total_price_after_discount,
        "tax": tax_amount(totals.total_price_after_discount),
        "display_total": display_total(totals.total_price_after_discount),
    }


def build_cart_view(cart, lang: str) -> Tuple[Dict[str, Any], Dict[int, Decimal]]:
    items, lines, corrections = enrich_lines(cart.items, lang)
    totals = aggregate_totals(lines, cart.discount)

    view = {
        "id": cart.id,
        "user_id": cart.user_id,
        "customer": customer_of(cart.user),
        "status": cart.status,
        "status_text": label(CART_STATUS_LABELS, cart.status, lang),
        "notes": cart.notes,
        "notes_text": localize(cart.notes, lang),
        "items": items,
        "created_at": cart.created_at,
        "updated_at": cart.updated_at,
        **totals_view(totals),
    }
    return view, corrections


def _address_text(address: Dict[str, Any] | None, lang: str) -> str:
    if not address:
        return ""
    parts = [
        localize(address.get("address"), lang),
        localize(address.get("city"), lang),
        localize(address.get("country"), lang),
        address.get("postal_code") or "",
    ]
    return ", ".join(p for p in parts if p)


def build_order_view(order, lang: str) -> Dict[str, Any]:
    # order lines carry prices frozen at checkout
    items, lines, _ = enrich_lines(order.items, lang, reconcile=False)
    totals = aggregate_totals(lines, order.discount_percent)

    return {
        "id": order.id,
        "user_id": order.user_id,
        "customer": customer_of(order.user),
        "status": order.status,
        "status_text": label(ORDER_STATUS_LABELS, order.status, lang),
        "payment_method": order.payment_method,
        "payment_method_text": label(PAYMENT_METHOD_LABELS, order.payment_method, lang),
        "payment_status": order.payment_status,
        "payment_status_text": label(PAYMENT_STATUS_LABELS, order.payment_status, lang),
        "is_paid": order.is_paid,
        "paid_at": order.paid_at,
        "is_delivered": order.is_delivered,
        "delivered_at": order.delivered_at,
        "shipping_address": order.shipping_address or {},
        "shipping_address_text": _address_text(order.shipping_address, lang),
        "notes": order.notes,
        "items": items,
        "total_order_price": order.total_order_price,
        "created_at": order.created_at,
        **totals_view(totals),
    }
