"""
Price resolution: direct slab matches, extended range, gaps, rounding
and the fail-open behaviour on bad input.
"""
import math

import pytest

from slab_pricing.engine import resolve_price, round_currency, parse_quantity, step_quantity
from slab_pricing.engine.models import DiscountType, PricingSlab

FLAT = DiscountType.FLAT
PCT = DiscountType.PERCENTAGE


@pytest.mark.parametrize("price,qty", [(0, 1), (28.5, 1), (100, 7), (0.1, 3)])
def test_no_slabs_returns_list_price(price, qty):
    quote = resolve_price(price, [], qty)
    assert quote.final_unit_price == price
    assert quote.final_total == pytest.approx(price * qty)
    assert quote.applied_slab is None
    assert quote.is_extended_range is False
    assert quote.savings == 0
    assert quote.savings_percentage == 0


def test_direct_match(tiered_slabs):
    quote = resolve_price(100, tiered_slabs, 3)
    assert quote.applied_slab == tiered_slabs[0]
    assert quote.is_extended_range is False
    assert quote.final_unit_price == 95.0
    assert quote.final_total == 285.0
    assert quote.savings == 15.0


@pytest.mark.parametrize("qty,expected_min", [(1, 1), (5, 1), (6, 6), (10, 6)])
def test_boundaries_are_inclusive(tiered_slabs, qty, expected_min):
    quote = resolve_price(100, tiered_slabs, qty)
    assert quote.applied_slab.min_quantity == expected_min
    assert quote.is_extended_range is False


def test_extended_range_reuses_highest_slab(tiered_slabs):
    quote = resolve_price(100, tiered_slabs, 50)
    assert quote.applied_slab.min_quantity == 6
    assert quote.is_extended_range is True
    assert quote.discount_per_unit == 10
    assert quote.final_unit_price == 90.0
    assert quote.final_total == 4500.0
    assert quote.savings == 500.0
    assert quote.savings_percentage == 10.0


def test_gap_below_lowest_slab_is_undiscounted():
    quote = resolve_price(50, [PricingSlab(10, 20, FLAT, 5)], 3)
    assert quote.applied_slab is None
    assert quote.final_total == 150
    assert quote.savings == 0


def test_gap_between_slabs_is_undiscounted():
    slabs = [PricingSlab(1, 5, FLAT, 2), PricingSlab(20, 30, FLAT, 4)]
    quote = resolve_price(50, slabs, 10)
    assert quote.applied_slab is None
    assert quote.is_extended_range is False
    assert quote.final_total == 500


def test_percentage_discount():
    quote = resolve_price(100, [PricingSlab(1, 5, PCT, 20)], 2)
    assert quote.final_unit_price == 80.00
    assert quote.final_total == 160.00
    assert quote.savings == 40.0
    assert quote.savings_percentage == 20


def test_flat_discount_cannot_go_negative():
    quote = resolve_price(50, [PricingSlab(1, 5, FLAT, 1000)], 1)
    assert quote.final_unit_price == 0
    assert quote.final_total == 0
    assert quote.savings == 50
    assert quote.savings_percentage == 100


def test_unvalidated_percentage_over_100_clamps_at_zero():
    quote = resolve_price(40, [PricingSlab(1, 5, PCT, 150)], 2)
    assert quote.final_unit_price == 0


def test_negative_discount_never_surcharges():
    quote = resolve_price(40, [PricingSlab(1, 5, FLAT, -10)], 2)
    assert quote.final_unit_price == 40
    assert quote.final_total == 80


def test_rounding_happens_after_extension():
    """12.5% off 1.00 is 0.875/unit: the unit rounds to 0.88 but 2 units cost 1.75."""
    quote = resolve_price(1.0, [PricingSlab(1, 5, PCT, 12.5)], 2)
    assert quote.final_unit_price == 0.88
    assert quote.final_total == 1.75
    assert quote.discount_per_unit == 0.125


@pytest.mark.parametrize("value,expected", [(2.675, 2.68), (0.125, 0.13), (1.005, 1.01), (10, 10.0), (3.14159, 3.14)])
def test_round_currency_half_up(value, expected):
    assert round_currency(value) == expected


def test_disabled_quantity_pricing(tiered_slabs):
    quote = resolve_price(100, tiered_slabs, 3, enabled=False)
    assert quote.applied_slab is None
    assert quote.final_total == 300


def test_inactive_slabs_ignored():
    slabs = [PricingSlab(1, 5, FLAT, 5, is_active=False)]
    quote = resolve_price(100, slabs, 3)
    assert quote.applied_slab is None
    assert quote.final_total == 300


def test_inactive_highest_slab_not_used_for_extended_range():
    slabs = [PricingSlab(1, 5, FLAT, 5), PricingSlab(6, 10, FLAT, 10, is_active=False)]
    quote = resolve_price(100, slabs, 50)
    assert quote.applied_slab.min_quantity == 1
    assert quote.is_extended_range is True
    assert quote.final_unit_price == 95


def test_overlapping_slabs_use_first_by_min_quantity():
    slabs = [PricingSlab(5, 15, FLAT, 8), PricingSlab(1, 10, FLAT, 5)]
    quote = resolve_price(100, slabs, 7)
    assert quote.applied_slab.min_quantity == 1
    assert quote.final_unit_price == 95
    assert any("overlap" in w for w in quote.warnings)


def test_monotonic_within_each_slab():
    slabs = [PricingSlab(1, 5, FLAT, 2), PricingSlab(6, 12, PCT, 10), PricingSlab(13, 40, PCT, 25)]
    for slab in slabs:
        prices = [resolve_price(80, slabs, q).final_unit_price
                  for q in range(slab.min_quantity, slab.max_quantity + 1)]
        assert all(a >= b for a, b in zip(prices, prices[1:]))


def test_idempotent(tiered_slabs):
    first = resolve_price(99.99, tiered_slabs, 42)
    second = resolve_price(99.99, tiered_slabs, 42)
    assert first.to_dict() == second.to_dict()
    assert first.get_trace_text() == second.get_trace_text()


def test_does_not_mutate_input(tiered_slabs):
    slabs = list(reversed(tiered_slabs))
    resolve_price(100, slabs, 7)
    assert [s.min_quantity for s in slabs] == [6, 1]


@pytest.mark.parametrize("bad", [None, float("nan"), "abc", float("inf")])
def test_malformed_base_price_becomes_zero(tiered_slabs, bad):
    quote = resolve_price(bad, tiered_slabs, 3)
    for value in (quote.base_unit_price, quote.final_unit_price, quote.final_total, quote.savings):
        assert not math.isnan(value)
        assert value == 0


def test_negative_base_price_treated_as_zero(tiered_slabs):
    quote = resolve_price(-10, tiered_slabs, 3)
    assert quote.base_unit_price == 0
    assert quote.final_total == 0
    assert quote.warnings


def test_dict_slabs_with_missing_fields():
    slabs = [{"minQuantity": float("nan"), "maxQuantity": 10, "discountType": "FLAT", "discountValue": None}]
    quote = resolve_price(20, slabs, 2)
    assert quote.applied_slab.min_quantity == 0
    assert quote.final_unit_price == 20
    assert quote.final_total == 40


def test_unknown_discount_type_gives_no_discount():
    slabs = [{"minQuantity": 1, "maxQuantity": 10, "discountType": "BOGO", "discountValue": 5}]
    quote = resolve_price(20, slabs, 2)
    assert quote.final_total == 40
    assert quote.warnings


def test_unreadable_slab_entries_skipped():
    quote = resolve_price(20, [None, {"minQuantity": 1, "maxQuantity": 5, "discountType": "FLAT", "discountValue": 2}], 2)
    assert quote.final_unit_price == 18
    assert quote.warnings


@pytest.mark.parametrize("raw,expected", [(0, 1), (-4, 1), ("abc", 1), (None, 1), ("7", 7), (3.7, 3)])
def test_parse_quantity(raw, expected):
    assert parse_quantity(raw) == expected


def test_quote_quantity_is_coerced(tiered_slabs):
    assert resolve_price(100, tiered_slabs, 0).quantity == 1


def test_step_quantity_never_below_one():
    assert step_quantity(1, -1) == 1
    assert step_quantity(4, -1) == 3
    assert step_quantity(4) == 5


def test_to_dict_camel_case(tiered_slabs):
    data = resolve_price(100, tiered_slabs, 50).to_dict()
    assert data["finalUnitPrice"] == 90.0
    assert data["finalTotal"] == 4500.0
    assert data["isExtendedRange"] is True
    assert data["appliedSlab"] == {
        "minQuantity": 6, "maxQuantity": 10, "discountType": "FLAT", "discountValue": 10, "isActive": True
    }


def test_on_quote_callback_receives_result(tiered_slabs):
    seen = []
    quote = resolve_price(100, tiered_slabs, 6, on_quote=seen.append)
    assert seen == [quote]
    assert seen[0].final_total == 540.0


@pytest.mark.parametrize("value,expected", [(float("inf"), 0.0), (float("nan"), 0.0), (None, 0.0), (1e300, 1e300)])
def test_round_currency_extremes(value, expected):
    assert round_currency(value) == expected


def test_quantity_too_large_for_float_falls_back_to_one():
    quote = resolve_price(100, [], 10**400)
    assert quote.quantity == 1
    assert quote.final_total == 100


def test_overflowing_total_treated_as_zero(tiered_slabs):
    quote = resolve_price(1e308, tiered_slabs, 10)
    assert quote.base_unit_price == 0
    assert quote.base_total == 0
    assert quote.final_total == 0
    assert quote.savings == 0
    assert quote.warnings
    assert all(math.isfinite(v) for v in (quote.final_unit_price, quote.savings_percentage))


def test_large_finite_total_is_still_priced(tiered_slabs):
    quote = resolve_price(1e300, tiered_slabs, 2)
    assert quote.applied_slab.min_quantity == 1
    assert quote.final_unit_price == 1e300
    assert quote.final_total == 2e300
    assert not quote.warnings


@pytest.mark.parametrize("bad", [None, float("nan"), "abc"])
def test_slab_instance_with_bad_discount_gives_no_discount(bad):
    quote = resolve_price(100, [PricingSlab(1, 5, FLAT, bad)], 2)
    assert quote.applied_slab.discount_value == 0
    assert quote.final_unit_price == 100
    assert quote.final_total == 200


def test_slab_instance_with_nan_bounds():
    slab = PricingSlab(float("nan"), None, FLAT, 5)
    assert (slab.min_quantity, slab.max_quantity) == (0, 0)
    quote = resolve_price(100, [slab], 3)
    assert quote.is_extended_range is True
    assert quote.final_unit_price == 95
