"""
Inventory Service - pricing settings for a retailer's inventory records.

Handles reading/writing inventory.csv. Each record owns its selling price,
stock levels, quantity-pricing toggle and slab list (stored as JSON).
"""
import csv
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import pandas as pd

from ..engine.models import PricingSlab, PriceQuote, ValidationError, coerce_int, coerce_number, parse_bool
from ..engine.price_resolver import resolve_price
from ..engine.slab_tools import example_prices
from ..engine.slab_validator import to_slab, validate_slabs
from ..exceptions import DuplicateItemError, ItemNotFoundError, SettingsValidationFailed
from ..logging_setup import get_logger

logger = get_logger(__name__)


@dataclass
class InventoryItem:
    """A product as stocked by one retailer."""
    item_id: str
    product_name: str
    default_price: float = 0.0
    selling_price: float = 0.0
    min_stock_level: int = 10
    max_stock_level: int = 100
    enable_quantity_pricing: bool = False
    pricing_slabs: list[PricingSlab] = field(default_factory=list)

    @property
    def is_price_overridden(self) -> bool:
        """True when the retailer sells at something other than the catalog price."""
        return self.selling_price != self.default_price

    def to_csv_row(self) -> dict:
        """Convert to CSV row format."""
        return {
            'item_id': self.item_id,
            'product_name': self.product_name,
            'default_price': str(self.default_price),
            'selling_price': str(self.selling_price),
            'min_stock_level': str(self.min_stock_level),
            'max_stock_level': str(self.max_stock_level),
            'enable_quantity_pricing': 'true' if self.enable_quantity_pricing else 'false',
            'pricing_slabs': json.dumps([s.to_dict() for s in self.pricing_slabs]),
        }

    @classmethod
    def from_csv_row(cls, row: dict) -> 'InventoryItem':
        """Create InventoryItem from CSV row."""
        try:
            raw_slabs = json.loads(row.get('pricing_slabs') or '[]')
        except json.JSONDecodeError:
            logger.warning("Unreadable slabs for item %s, treating as none", row.get('item_id'))
            raw_slabs = []
        slabs = [s for s in (to_slab(r) for r in raw_slabs) if s is not None]

        return cls(
            item_id=row.get('item_id', ''),
            product_name=row.get('product_name', ''),
            default_price=coerce_number(row.get('default_price')),
            selling_price=coerce_number(row.get('selling_price')),
            min_stock_level=coerce_int(row.get('min_stock_level'), 10),
            max_stock_level=coerce_int(row.get('max_stock_level'), 100),
            enable_quantity_pricing=parse_bool(row.get('enable_quantity_pricing'), default=False),
            pricing_slabs=slabs,
        )

    def to_dict(self) -> dict:
        """camelCase form returned by the API."""
        return {
            'itemId': self.item_id,
            'productName': self.product_name,
            'defaultPrice': self.default_price,
            'sellingPrice': self.selling_price,
            'isPriceOverridden': self.is_price_overridden,
            'minStockLevel': self.min_stock_level,
            'maxStockLevel': self.max_stock_level,
            'enableQuantityPricing': self.enable_quantity_pricing,
            'pricingSlabs': [s.to_dict() for s in self.pricing_slabs],
        }


@dataclass
class SettingsValidationResult:
    """Result of pricing settings validation."""
    valid: bool
    errors: list[str] = field(default_factory=list)
    slab_errors: list[ValidationError] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            'valid': self.valid,
            'errors': list(self.errors),
            'slabErrors': [e.to_dict() for e in self.slab_errors],
        }


class InventoryService:
    """Service for managing inventory pricing settings."""

    CSV_COLUMNS = [
        'item_id', 'product_name', 'default_price', 'selling_price',
        'min_stock_level', 'max_stock_level', 'enable_quantity_pricing', 'pricing_slabs'
    ]

    # camelCase keys accepted by update_settings
    FIELD_ALIASES = {
        'productName': 'product_name',
        'defaultPrice': 'default_price',
        'sellingPrice': 'selling_price',
        'minStockLevel': 'min_stock_level',
        'maxStockLevel': 'max_stock_level',
        'enableQuantityPricing': 'enable_quantity_pricing',
        'pricingSlabs': 'pricing_slabs',
    }

    def __init__(self, inventory_csv_path: Path):
        self.inventory_csv_path = Path(inventory_csv_path)

    def list_items(self) -> list[InventoryItem]:
        """List all inventory records from CSV."""
        items = []
        if not self.inventory_csv_path.exists():
            return items

        with open(self.inventory_csv_path, 'r', encoding='utf-8', newline='') as f:
            reader = csv.DictReader(f)
            for row in reader:
                if not row.get('item_id'):
                    continue
                items.append(InventoryItem.from_csv_row(row))

        return items

    def items_frame(self) -> pd.DataFrame:
        """Summary table of all records for display."""
        rows = [
            {
                'Item': item.item_id,
                'Product': item.product_name,
                'Selling Price': item.selling_price,
                'Quantity Pricing': item.enable_quantity_pricing,
                'Slabs': len(item.pricing_slabs),
            }
            for item in self.list_items()
        ]
        return pd.DataFrame(rows, columns=['Item', 'Product', 'Selling Price', 'Quantity Pricing', 'Slabs'])

    def get_item(self, item_id: str) -> InventoryItem:
        """Get a single record by ID."""
        for item in self.list_items():
            if item.item_id == item_id:
                return item
        raise ItemNotFoundError(item_id)

    def create_item(self, item: InventoryItem) -> InventoryItem:
        """Add a new record."""
        items = self.list_items()
        if any(existing.item_id == item.item_id for existing in items):
            raise DuplicateItemError(item.item_id)

        items.append(item)
        self._write_items(items)
        logger.info("Created inventory item %s", item.item_id)
        return item

    def validate_settings(self, item: InventoryItem) -> SettingsValidationResult:
        """Validate pricing settings before saving."""
        result = SettingsValidationResult(valid=True)

        if item.selling_price <= 0:
            result.errors.append("Please enter a valid selling price")

        if item.min_stock_level < 0:
            result.errors.append("Minimum stock level cannot be negative")

        if item.max_stock_level <= item.min_stock_level:
            result.errors.append("Maximum stock level must be greater than minimum stock level")

        # Slabs only matter while quantity pricing is switched on
        if item.enable_quantity_pricing:
            slab_result = validate_slabs(item.pricing_slabs)
            result.slab_errors = slab_result.errors
            result.errors.extend(slab_result.messages())

        result.valid = not result.errors
        return result

    def update_settings(self, item_id: str, updates: dict) -> InventoryItem:
        """
        Apply and persist pricing settings for one record.

        Raises:
            ItemNotFoundError: unknown item_id
            SettingsValidationFailed: any setting invalid; nothing is saved
        """
        items = self.list_items()
        index = next((i for i, it in enumerate(items) if it.item_id == item_id), None)
        if index is None:
            raise ItemNotFoundError(item_id)

        item = items[index]
        for key, value in updates.items():
            key = self.FIELD_ALIASES.get(key, key)
            if key == 'item_id' or not hasattr(item, key):
                continue
            setattr(item, key, self._coerce_field(key, value))

        validation = self.validate_settings(item)
        if not validation.valid:
            logger.info("Rejected settings for %s: %s", item_id, validation.errors)
            raise SettingsValidationFailed(validation.errors)

        if not item.enable_quantity_pricing:
            item.pricing_slabs = []

        items[index] = item
        self._write_items(items)
        logger.info("Saved pricing settings for %s (%d slabs)", item_id, len(item.pricing_slabs))
        return item

    def quote(self, item_id: str, quantity: Any) -> PriceQuote:
        """Resolve the price of a quantity against the stored record."""
        item = self.get_item(item_id)
        return resolve_price(
            item.selling_price,
            item.pricing_slabs,
            quantity,
            enabled=item.enable_quantity_pricing
        )

    def preview(self, item_id: str, currency_symbol: str = '₹') -> list[dict]:
        """Example price at each slab's minimum quantity."""
        item = self.get_item(item_id)
        return example_prices(
            item.selling_price,
            item.pricing_slabs,
            enabled=item.enable_quantity_pricing,
            currency_symbol=currency_symbol
        )

    def _coerce_field(self, key: str, value: Any) -> Any:
        """Normalise loosely-typed form input for one field."""
        if key in ('default_price', 'selling_price'):
            return coerce_number(value)
        if key == 'min_stock_level':
            return coerce_int(value, 10)
        if key == 'max_stock_level':
            return coerce_int(value, 100)
        if key == 'enable_quantity_pricing':
            return parse_bool(value, default=False)
        if key == 'pricing_slabs':
            slabs = []
            for index, raw in enumerate(value or []):
                slab = to_slab(raw)
                if slab is None:
                    raise SettingsValidationFailed([f"Slab {index + 1}: Not a valid slab record"])
                slabs.append(slab)
            return slabs
        return value

    def _write_items(self, items: list[InventoryItem]):
        """Write records back to CSV."""
        self.inventory_csv_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.inventory_csv_path, 'w', encoding='utf-8', newline='') as f:
            writer = csv.DictWriter(f, fieldnames=self.CSV_COLUMNS)
            writer.writeheader()
            for item in items:
                writer.writerow(item.to_csv_row())
