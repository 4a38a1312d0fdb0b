"""
Slab presentation helpers for the settings form and price preview.
"""
from typing import Any, Iterable, Optional

import pandas as pd

from .models import DiscountType, PricingSlab
from .price_resolver import resolve_price
from .slab_validator import to_slab


def _format_amount(value: float) -> str:
    """Drop trailing zeros: 5.0 reads as 5, 12.50 as 12.5."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}".rstrip('0').rstrip('.')


def describe_slab(slab: PricingSlab, currency_symbol: str = '₹') -> str:
    """
    One-line offer text for a slab.

    e.g. "₹5 off for 1-5 units", "20% off for 6-10 units"
    """
    amount = _format_amount(slab.discount_value)
    if slab.discount_type == DiscountType.PERCENTAGE:
        offer = f"{amount}% off"
    elif slab.discount_type == DiscountType.FLAT:
        offer = f"{currency_symbol}{amount} off"
    else:
        offer = "No discount"
    return f"{offer} for {slab.min_quantity}-{slab.max_quantity} units"


def next_slab_template(slabs: Optional[Iterable[Any]], span: int = 10) -> PricingSlab:
    """Default values for a newly added slab, continuing after the last one."""
    existing = [s for s in (to_slab(raw) for raw in (slabs or [])) if s is not None]
    if not existing:
        return PricingSlab(min_quantity=1, max_quantity=span)

    last = existing[-1]
    return PricingSlab(
        min_quantity=last.max_quantity + 1,
        max_quantity=last.max_quantity + span,
    )


def _sorted_active(slabs: Optional[Iterable[Any]]) -> list[PricingSlab]:
    active = [s for s in (to_slab(raw) for raw in (slabs or [])) if s is not None and s.is_active]
    return sorted(active, key=lambda s: s.min_quantity)


def example_prices(
    base_unit_price: Any,
    slabs: Optional[Iterable[Any]],
    enabled: bool = True,
    currency_symbol: str = '₹'
) -> list[dict]:
    """Quote each active slab at its minimum quantity."""
    examples = []
    for slab in _sorted_active(slabs):
        quote = resolve_price(base_unit_price, slabs, slab.min_quantity, enabled=enabled)
        examples.append({
            'slab': slab.to_dict(),
            'quantity': quote.quantity,
            'finalTotal': quote.final_total,
            'description': describe_slab(slab, currency_symbol),
        })
    return examples


def quote_table(
    base_unit_price: Any,
    slabs: Optional[Iterable[Any]],
    quantities: Iterable[Any],
    enabled: bool = True,
    currency_symbol: str = '₹'
) -> pd.DataFrame:
    """One row per quantity with the resolved quote fields."""
    slabs = list(slabs or [])
    rows = []
    for qty in quantities:
        quote = resolve_price(base_unit_price, slabs, qty, enabled=enabled)
        rows.append({
            'Quantity': quote.quantity,
            'Unit Price': quote.final_unit_price,
            'Total': quote.final_total,
            'Savings': quote.savings,
            'Savings %': quote.savings_percentage,
            'Slab': describe_slab(quote.applied_slab, currency_symbol) if quote.applied_slab else '',
            'Extended Range': quote.is_extended_range,
        })
    return pd.DataFrame(rows, columns=[
        'Quantity', 'Unit Price', 'Total', 'Savings', 'Savings %', 'Slab', 'Extended Range'
    ])
