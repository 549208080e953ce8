# souq/domain/localization.py
"""
Bilingual text helpers.

A localized value is either a plain string, an ``{"en": ..., "ar": ...}`` pair,
or absent. Everything that renders one for a caller goes through ``localize``.
"""
from typing import Any

from souq.utils.settings import DEFAULT_LANGUAGE

LANGUAGES = ("en", "ar")

CART_STATUS_LABELS = {
    "active": {"en": "Active", "ar": "نشطة"},
    "abandoned": {"en": "Abandoned", "ar": "متروكة"},
    "converted": {"en": "Converted", "ar": "تم التحويل"},
}

ORDER_STATUS_LABELS = {
    "pending": {"en": "Pending", "ar": "قيد الانتظار"},
    "processing": {"en": "Processing", "ar": "قيد المعالجة"},
    "shipped": {"en": "Shipped", "ar": "تم الشحن"},
    "delivered": {"en": "Delivered", "ar": "تم التوصيل"},
    "cancelled": {"en": "Cancelled", "ar": "ملغي"},
}

PAYMENT_STATUS_LABELS = {
    "pending": {"en": "Pending", "ar": "قيد الانتظار"},
    "paid": {"en": "Paid", "ar": "مدفوع"},
    "failed": {"en": "Failed", "ar": "فشل"},
    "refunded": {"en": "Refunded", "ar": "مسترد"},
}

PAYMENT_METHOD_LABELS = {
    "cash": {"en": "Cash on delivery", "ar": "الدفع عند الاستلام"},
    "card": {"en": "Credit card", "ar": "بطاقة ائتمان"},
    "bank_transfer": {"en": "Bank transfer", "ar": "تحويل بنكي"},
}


def resolve_language(accept_language: str | None) -> str:
    if not accept_language:
        return DEFAULT_LANGUAGE
    return "ar" if accept_language.strip().lower().startswith("ar") else "en"


def localize(value: Any, lang: str, fallback: str = "") -> str:
    if not value:
        return fallback
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        return value.get(lang) or value.get("en") or value.get("ar") or fallback
    if isinstance(value, (list, tuple)):
        parts = [localize(v, lang) for v in value]
        return ", ".join(p for p in parts if p) or fallback
    return fallback


def label(labels: dict, key: str | None, lang: str) -> str:
    # unknown keys fall back to the raw value
    return localize(labels.get(key), lang, fallback=key or "")
