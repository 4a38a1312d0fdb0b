"""
Exceptions raised by the inventory settings service.

The pricing engine itself never raises: slab problems come back as
validation data and price resolution falls back to the list price.
Each error carries a stable code so the API can pass it to the storefront.
"""


class SlabPricingError(Exception):
    """Base class for inventory pricing errors."""
    code = 'PRICING_ERROR'

    def __init__(self, message: str, **details):
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self):
        return f"{self.code}: {self.message}"

    def to_dict(self) -> dict:
        """Error body for API responses: code, message and any context fields."""
        return {'code': self.code, 'message': self.message, **self.details}


class ItemNotFoundError(SlabPricingError):
    """No inventory record with this id."""
    code = 'ITEM_NOT_FOUND'

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"No inventory record for item '{item_id}'", itemId=item_id)


class DuplicateItemError(SlabPricingError):
    """An inventory record with this id already exists."""
    code = 'DUPLICATE_ITEM'

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"Item '{item_id}' is already stocked", itemId=item_id)


class SettingsValidationFailed(SlabPricingError):
    """Pricing settings were rejected; `errors` holds every form message."""
    code = 'INVALID_SETTINGS'

    def __init__(self, errors):
        self.errors = list(errors)
        count = len(self.errors)
        super().__init__(
            f"{count} pricing setting{'s' if count != 1 else ''} need fixing",
            errors=self.errors,
        )
