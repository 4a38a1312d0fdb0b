#!/usr/bin/env python
"""
Validate the pricing settings of every stored inventory record.

Usage:
    python scripts/check_slabs.py
"""
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from slab_pricing.config.settings import get_settings
from slab_pricing.services.inventory_service import InventoryService


def main():
    settings = get_settings()
    service = InventoryService(settings.inventory_csv)
    
    items = service.list_items()
    print(f"Checking {len(items)} inventory records in {settings.inventory_csv}")
    print()
    
    failed = 0
    for item in items:
        result = service.validate_settings(item)
        if result.valid:
            print(f"  ✅ {item.item_id}: {len(item.pricing_slabs)} slabs")
        else:
            failed += 1
            print(f"  ❌ {item.item_id}")
            for error in result.errors:
                print(f"      {error}")
    
    if failed:
        print(f"\n❌ {failed} records have invalid settings")
        sys.exit(1)
    
    print("\n✅ All settings valid")


if __name__ == "__main__":
    main()
