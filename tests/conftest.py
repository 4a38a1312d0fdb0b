import sys
import os

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from slab_pricing.engine.models import DiscountType, PricingSlab


@pytest.fixture
def tiered_slabs():
    """Two contiguous FLAT slabs: 1-5 at 5 off, 6-10 at 10 off."""
    return [
        PricingSlab(1, 5, DiscountType.FLAT, 5),
        PricingSlab(6, 10, DiscountType.FLAT, 10),
    ]
