"""Engine subpackage - slab validation and price resolution."""
from .models import PricingSlab, DiscountType, PriceQuote, SlabValidationResult, ValidationError, ValidationErrorCode
from .slab_validator import validate_slabs
from .price_resolver import resolve_price, round_currency, parse_quantity, step_quantity

__all__ = [
    'PricingSlab', 'DiscountType', 'PriceQuote', 'SlabValidationResult',
    'ValidationError', 'ValidationErrorCode',
    'validate_slabs', 'resolve_price', 'round_currency', 'parse_quantity', 'step_quantity',
]
