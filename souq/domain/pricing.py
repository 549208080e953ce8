# souq/domain/pricing.py
"""
Cart/order price reconciliation.

Three pieces, each usable on its own:

- ``resolve_variant`` finds the option carrying a SKU in a product's variant tree,
- ``reconcile_price`` decides the unit price of a line given that option,
- ``aggregate_totals`` sums reconciled lines into cart/order totals.

Nothing here touches the database. Callers decide what to do with
``PriceResolution.was_corrected``.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable, NamedTuple, Optional

from souq.utils.settings import DISPLAY_TAX_RATE

ZERO = Decimal("0")
CENT = Decimal("0.01")


class VariantMatch(NamedTuple):
    group: dict
    option: dict


@dataclass(frozen=True)
class PriceResolution:
    price: Decimal
    was_corrected: bool


@dataclass(frozen=True)
class Totals:
    total_items: int
    total_price_before_discount: Decimal
    discount_percent: Decimal
    discount_amount: Decimal
    total_price_after_discount: Decimal


def to_decimal(value: Any) -> Decimal:
    if value is None or value == "":
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def resolve_variant(variants: Optional[Iterable[dict]], sku: str) -> Optional[VariantMatch]:
    """
    Scan variant groups in stored order, options in stored order;
    the first option whose SKU equals ``sku`` wins.
    """
    for group in variants or []:
        for option in group.get("options") or []:
            if option.get("sku") == sku:
                return VariantMatch(group=group, option=option)
    return None


def option_price(option: dict) -> Decimal:
    # discounted price first, zero counts as "not set"
    return to_decimal(option.get("price_after_discount") or option.get("price") or 0)


def reconcile_price(stored_price: Any, match: Optional[VariantMatch]) -> PriceResolution:
    price = to_decimal(stored_price)

    if price != ZERO or match is None:
        return PriceResolution(price=price, was_corrected=False)

    derived = option_price(match.option)
    return PriceResolution(price=derived, was_corrected=derived > ZERO)


def aggregate_totals(lines: Iterable[tuple[Any, int]], discount_percent: Any = 0) -> Totals:
    """
    ``lines`` are ``(unit_price, quantity)`` pairs. The discount percent is
    taken as given, range checks belong to whoever accepted it.
    """
    total_items = 0
    before = ZERO
    for price, quantity in lines:
        total_items += quantity
        before += to_decimal(price) * quantity

    percent = to_decimal(discount_percent)
    discount_amount = before * percent / Decimal(100)

    return Totals(
        total_items=total_items,
        total_price_before_discount=before,
        discount_percent=percent,
        discount_amount=discount_amount,
        total_price_after_discount=before - discount_amount,
    )


def tax_amount(amount: Any, tax_rate: Any = None) -> Decimal:
    rate = DISPLAY_TAX_RATE if tax_rate is None else to_decimal(tax_rate)
    return (to_decimal(amount) * rate).quantize(CENT, rounding=ROUND_HALF_UP)


def display_total(amount: Any, tax_rate: Any = None) -> Decimal:
    """Post-discount total with the flat presentation tax applied."""
    rate = DISPLAY_TAX_RATE if tax_rate is None else to_decimal(tax_rate)
    return (to_decimal(amount) * (1 + rate)).quantize(CENT, rounding=ROUND_HALF_UP)
