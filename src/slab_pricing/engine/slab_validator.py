"""
Slab Validator - checks that a set of pricing slabs is internally consistent.

Runs before slabs are persisted from the settings form. Problems are
collected and returned together, never raised, so the form can show all
of them at once.
"""
from typing import Any, Iterable, Optional

from ..logging_setup import get_logger
from .models import (
    DiscountType,
    PricingSlab,
    SlabValidationResult,
    ValidationError,
    ValidationErrorCode,
)

logger = get_logger(__name__)


def to_slab(obj: Any) -> Optional[PricingSlab]:
    """Accept a PricingSlab or a mapping; anything else is unusable."""
    if isinstance(obj, PricingSlab):
        return obj
    if isinstance(obj, dict):
        return PricingSlab.from_dict(obj)
    return None


def _check_slab(index: int, slab: PricingSlab) -> list[ValidationError]:
    """Per-slab field checks."""
    errors = []
    label = f"Slab {index + 1}"

    if slab.min_quantity < 0:
        errors.append(ValidationError(
            ValidationErrorCode.NEGATIVE_QUANTITY, (index,),
            f"{label}: Minimum quantity cannot be negative"
        ))

    if slab.max_quantity <= slab.min_quantity:
        errors.append(ValidationError(
            ValidationErrorCode.INVALID_RANGE, (index,),
            f"{label}: Maximum quantity must be greater than minimum quantity"
        ))

    if slab.discount_type is None:
        errors.append(ValidationError(
            ValidationErrorCode.INVALID_DISCOUNT_TYPE, (index,),
            f"{label}: Discount type must be FLAT or PERCENTAGE"
        ))

    if slab.discount_value < 0:
        errors.append(ValidationError(
            ValidationErrorCode.NEGATIVE_DISCOUNT, (index,),
            f"{label}: Discount value cannot be negative"
        ))

    if slab.discount_type == DiscountType.PERCENTAGE and slab.discount_value > 100:
        errors.append(ValidationError(
            ValidationErrorCode.PERCENTAGE_OUT_OF_BOUNDS, (index,),
            f"{label}: Percentage discount cannot exceed 100%"
        ))

    return errors


def _check_overlaps(indexed: list[tuple[int, PricingSlab]]) -> list[ValidationError]:
    """
    Report every pair of active slabs whose ranges intersect.

    Sorted by min_quantity, a slab can only intersect the slabs that start
    at or before its own max_quantity, so the inner scan stops early.
    """
    errors = []
    active = sorted(
        ((i, s) for i, s in indexed if s.is_active),
        key=lambda pair: pair[1].min_quantity
    )

    for pos, (i, slab) in enumerate(active):
        for j, other in active[pos + 1:]:
            if other.min_quantity > slab.max_quantity:
                break
            errors.append(ValidationError(
                ValidationErrorCode.OVERLAPPING_RANGES, (i, j),
                f"Slab {i + 1} and {j + 1} have overlapping quantity ranges"
            ))

    return errors


def validate_slabs(slabs: Optional[Iterable[Any]]) -> SlabValidationResult:
    """
    Validate a slab set as a whole.

    Args:
        slabs: PricingSlab instances or camelCase/snake_case dicts

    Returns:
        SlabValidationResult with every violation found; valid only if none
    """
    errors = []
    indexed = []

    for index, raw in enumerate(slabs or []):
        slab = to_slab(raw)
        if slab is None:
            errors.append(ValidationError(
                ValidationErrorCode.INVALID_RANGE, (index,),
                f"Slab {index + 1}: Not a valid slab record"
            ))
            continue
        indexed.append((index, slab))
        errors.extend(_check_slab(index, slab))

    errors.extend(_check_overlaps(indexed))

    logger.debug("Validated %d slabs: %d errors", len(indexed), len(errors))
    return SlabValidationResult(valid=not errors, errors=errors)
