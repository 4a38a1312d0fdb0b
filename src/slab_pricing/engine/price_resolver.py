"""
Price Resolver - quantity-based slab pricing.

Given a base (selling) unit price, the product's slabs and a quantity,
works out the discounted unit price and total.

Resolution order:
1. Quantity pricing disabled or no active slabs → list price
2. Direct match: first active slab (by min_quantity) containing the quantity
3. Extended range: quantity above every slab → the highest slab still applies
4. Gap below the highest slab → list price

The resolver is total: bad input degrades to the list price, it never raises.
"""
import math
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Any, Callable, Iterable, Optional

from ..logging_setup import get_logger
from .models import DiscountType, PriceQuote, PricingSlab, coerce_number
from .slab_validator import to_slab

logger = get_logger(__name__)

CENT = Decimal('0.01')

# Enough digits to quantize the largest finite float to cents
CURRENCY_PRECISION = 400


def round_currency(value: float) -> float:
    """Round half-up to 2 decimal places. Non-finite values become 0."""
    number = coerce_number(value)
    with localcontext() as ctx:
        ctx.prec = CURRENCY_PRECISION
        return float(Decimal(str(number)).quantize(CENT, rounding=ROUND_HALF_UP))


def parse_quantity(value: Any) -> int:
    """Coerce a quantity entry to an int of at least 1."""
    return max(1, int(coerce_number(value, 1.0)))


def step_quantity(quantity: Any, delta: int = 1) -> int:
    """Increment/decrement a quantity, never going below 1."""
    return max(1, parse_quantity(quantity) + int(delta))


def _active_slabs(slabs: Optional[Iterable[Any]], quote: PriceQuote) -> list[PricingSlab]:
    """Convert, drop inactive slabs and sort by min_quantity."""
    active = []
    for index, raw in enumerate(slabs or []):
        slab = to_slab(raw)
        if slab is None:
            quote.add_warning(f"Ignored unreadable slab at position {index + 1}")
            continue
        if slab.is_active:
            active.append(slab)
    active.sort(key=lambda s: s.min_quantity)
    return active


def _has_overlap(active: list[PricingSlab]) -> bool:
    return any(a.max_quantity >= b.min_quantity for a, b in zip(active, active[1:]))


def _discount_per_unit(base_price: float, slab: PricingSlab) -> float:
    """Per-unit discount, clamped so the unit price stays within [0, base_price]."""
    if slab.discount_type == DiscountType.FLAT:
        discount = slab.discount_value
    elif slab.discount_type == DiscountType.PERCENTAGE:
        discount = base_price * (slab.discount_value / 100)
    else:
        return 0.0
    return min(base_price, max(0.0, discount))


def _select_slab(active: list[PricingSlab], quantity: int) -> tuple[Optional[PricingSlab], bool]:
    """Return (slab, is_extended_range) for the quantity, or (None, False)."""
    for slab in active:
        if slab.contains(quantity):
            return slab, False

    # max() keeps the first of equal maxima, i.e. the earliest in sorted order
    last_slab = max(active, key=lambda s: s.max_quantity)
    if quantity >= last_slab.min_quantity:
        return last_slab, True

    return None, False


def resolve_price(
    base_unit_price: Any,
    slabs: Optional[Iterable[Any]],
    quantity: Any,
    enabled: bool = True,
    on_quote: Optional[Callable[[PriceQuote], None]] = None
) -> PriceQuote:
    """
    Resolve the price of `quantity` units.

    Args:
        base_unit_price: Retailer selling price per unit
        slabs: PricingSlab instances or camelCase/snake_case dicts
        quantity: Units purchased (coerced to an int ≥ 1)
        enabled: Product-level quantity pricing toggle
        on_quote: Called with the finished quote (price preview refresh)

    Returns:
        PriceQuote with trace and warnings. When a slab applies,
        final_unit_price, final_total, savings and savings_percentage are
        rounded half-up to 2 decimals; savings_percentage is rounded for
        display, so it may differ from savings / base_total in the third
        decimal. A total too large to represent is treated as 0 with a
        warning.
    """
    quote = _resolve(base_unit_price, slabs, quantity, enabled)
    if on_quote is not None:
        on_quote(quote)
    return quote


def _resolve(base_unit_price: Any, slabs: Optional[Iterable[Any]], quantity: Any, enabled: bool) -> PriceQuote:
    base_price = coerce_number(base_unit_price)
    qty = parse_quantity(quantity)

    warnings = []
    if base_price < 0:
        warnings.append(f"Negative base price {base_price} treated as 0")
        base_price = 0.0

    base_total = base_price * qty
    if not math.isfinite(base_total):
        warnings.append(f"Total for {qty} units at {base_price} is out of range, treated as 0")
        base_price = 0.0
        base_total = 0.0

    quote = PriceQuote(
        quantity=qty,
        base_unit_price=base_price,
        base_total=base_total,
        final_unit_price=base_price,
        final_total=base_total,
    )
    for warning in warnings:
        quote.add_warning(warning)

    quote.add_trace("Base Price", f"{qty} × {base_price:.2f}", f"{base_total:.2f}")

    if not enabled:
        quote.add_trace("Quantity Pricing", "Disabled for this product, using list price")
        return quote

    active = _active_slabs(slabs, quote)
    if not active:
        quote.add_trace("Slab Lookup", "No active slabs, using list price")
        return quote

    if _has_overlap(active):
        quote.add_warning("Slab ranges overlap; first matching slab applied")
        logger.warning("Resolving price against overlapping slabs: %s",
                       [(s.min_quantity, s.max_quantity) for s in active])

    slab, extended = _select_slab(active, qty)
    if slab is None:
        quote.add_trace("Slab Lookup", f"Quantity {qty} is below every slab, using list price")
        return quote

    if extended:
        quote.add_trace(
            "Extended Range",
            f"Quantity {qty} above all slabs, applying {slab.min_quantity}-{slab.max_quantity}"
        )
        logger.debug("Extended range: qty=%d slab=%d-%d", qty, slab.min_quantity, slab.max_quantity)
    else:
        quote.add_trace("Slab Lookup", f"Matched slab {slab.min_quantity}-{slab.max_quantity}")

    if slab.discount_type is None:
        quote.add_warning(
            f"Slab {slab.min_quantity}-{slab.max_quantity} has no valid discount type; no discount applied"
        )

    discount = _discount_per_unit(base_price, slab)
    unit_price = base_price - discount

    quote.applied_slab = slab
    quote.is_extended_range = extended
    quote.discount_per_unit = discount
    quote.final_unit_price = round_currency(unit_price)
    quote.final_total = round_currency(unit_price * qty)
    quote.savings = round_currency(base_total - quote.final_total)
    quote.savings_percentage = (
        round_currency((quote.savings / base_total) * 100) if base_total > 0 else 0.0
    )

    quote.add_trace("Discount", f"{discount:.2f} off per unit", f"{quote.final_unit_price:.2f}")
    quote.add_trace("Extension", f"Quantity {qty} × {unit_price:.2f}", f"{quote.final_total:.2f}")

    return quote
