"""
Data models for the slab pricing engine.

Uses dataclasses for structured, type-safe data representation.
Slabs arrive from the storefront in camelCase form, so every model that
crosses the wire has from_dict/to_dict helpers.
"""
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


def coerce_number(value: Any, default: float = 0.0) -> float:
    """
    Convert a loosely-typed numeric field to float.

    None, NaN, infinities, unparseable values and integers too large for a
    float become `default`.
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def coerce_int(value: Any, default: int = 0) -> int:
    """Convert a loosely-typed quantity field to int (truncating)."""
    return int(coerce_number(value, float(default)))


def parse_bool(value: Any, default: bool = True) -> bool:
    """Parse a boolean from JSON/CSV input."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ('true', '1', 'yes', 'on')
    return bool(value)


class DiscountType(str, Enum):
    """How a slab's discount_value is interpreted."""
    FLAT = "FLAT"              # currency amount off each unit
    PERCENTAGE = "PERCENTAGE"  # percent of the base unit price off each unit

    @classmethod
    def parse(cls, value: Any) -> Optional['DiscountType']:
        """Return the matching member, or None for anything unrecognised."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None


@dataclass
class PricingSlab:
    """A quantity range with a per-unit discount. Bounds are inclusive."""
    min_quantity: int
    max_quantity: int
    discount_type: Optional[DiscountType] = DiscountType.FLAT
    discount_value: float = 0.0
    is_active: bool = True

    def __post_init__(self):
        # None/NaN/garbage numbers become 0, unknown types become None
        self.min_quantity = coerce_int(self.min_quantity)
        self.max_quantity = coerce_int(self.max_quantity)
        self.discount_type = DiscountType.parse(self.discount_type)
        self.discount_value = coerce_number(self.discount_value)
        self.is_active = parse_bool(self.is_active, default=True)

    def contains(self, quantity: int) -> bool:
        """True if quantity falls within [min_quantity, max_quantity]."""
        return self.min_quantity <= quantity <= self.max_quantity

    @classmethod
    def from_dict(cls, data: dict) -> 'PricingSlab':
        """Create a slab from a camelCase or snake_case mapping."""
        def pick(camel, snake):
            if camel in data:
                return data[camel]
            return data.get(snake)

        return cls(
            min_quantity=pick('minQuantity', 'min_quantity'),
            max_quantity=pick('maxQuantity', 'max_quantity'),
            discount_type=pick('discountType', 'discount_type'),
            discount_value=pick('discountValue', 'discount_value'),
            is_active=pick('isActive', 'is_active'),
        )

    def to_dict(self) -> dict:
        """Convert to the camelCase storage/wire format."""
        return {
            'minQuantity': self.min_quantity,
            'maxQuantity': self.max_quantity,
            'discountType': self.discount_type.value if self.discount_type else None,
            'discountValue': self.discount_value,
            'isActive': self.is_active,
        }


@dataclass
class TraceStep:
    """A single step in the price resolution trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass
class PriceQuote:
    """Result of resolving a price for one quantity. Never persisted."""
    quantity: int
    base_unit_price: float
    base_total: float
    final_unit_price: float
    final_total: float
    applied_slab: Optional[PricingSlab] = None
    is_extended_range: bool = False
    discount_per_unit: float = 0.0
    savings: float = 0.0
    savings_percentage: float = 0.0
    warnings: list[str] = field(default_factory=list)
    trace: list[TraceStep] = field(default_factory=list)

    @property
    def has_discount(self) -> bool:
        return self.applied_slab is not None and self.savings > 0

    def add_trace(self, step: str, description: str, value: str = None):
        """Add a step to the trace for this quote."""
        self.trace.append(TraceStep(step=step, description=description, value=value))

    def add_warning(self, warning: str):
        """Add a warning for this quote."""
        if warning not in self.warnings:
            self.warnings.append(warning)

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"→ {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"→ {t.step}: {t.description}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        """Convert to the camelCase dict rendered by the price preview."""
        return {
            'quantity': self.quantity,
            'baseUnitPrice': self.base_unit_price,
            'baseTotal': self.base_total,
            'finalUnitPrice': self.final_unit_price,
            'finalTotal': self.final_total,
            'appliedSlab': self.applied_slab.to_dict() if self.applied_slab else None,
            'isExtendedRange': self.is_extended_range,
            'discountPerUnit': self.discount_per_unit,
            'savings': self.savings,
            'savingsPercentage': self.savings_percentage,
            'warnings': list(self.warnings),
        }


class ValidationErrorCode(str, Enum):
    NEGATIVE_QUANTITY = "NegativeQuantity"
    INVALID_RANGE = "InvalidRange"
    NEGATIVE_DISCOUNT = "NegativeDiscount"
    PERCENTAGE_OUT_OF_BOUNDS = "PercentageOutOfBounds"
    OVERLAPPING_RANGES = "OverlappingRanges"
    INVALID_DISCOUNT_TYPE = "InvalidDiscountType"


@dataclass
class ValidationError:
    """
    A single slab problem.

    `indices` are 0-based positions in the list the caller passed in;
    `message` uses the 1-based "Slab N" wording shown next to the form.
    """
    code: ValidationErrorCode
    indices: tuple[int, ...]
    message: str

    def to_dict(self) -> dict:
        return {
            'code': self.code.value,
            'indices': list(self.indices),
            'message': self.message,
        }


@dataclass
class SlabValidationResult:
    """Outcome of validating a slab set. Any error invalidates the whole set."""
    valid: bool
    errors: list[ValidationError] = field(default_factory=list)

    def codes(self) -> list[ValidationErrorCode]:
        return [e.code for e in self.errors]

    def messages(self) -> list[str]:
        return [e.message for e in self.errors]

    def to_dict(self) -> dict:
        return {
            'valid': self.valid,
            'errors': [e.to_dict() for e in self.errors],
        }
