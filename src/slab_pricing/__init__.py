"""
Slab Pricing Package

Quantity-based pricing for the dairy-delivery storefront.
Validates operator-defined discount slabs and resolves per-unit and total
prices for any purchased quantity, with extended-range fallback.
"""

__version__ = "1.0.0"
