"""
API endpoints for slab validation, quoting and inventory settings.
"""
import pytest
from fastapi.testclient import TestClient

from slab_pricing.api import state
from slab_pricing.api.main import app
from slab_pricing.engine.models import DiscountType, PricingSlab
from slab_pricing.services.inventory_service import InventoryItem

TIERED = [
    {"minQuantity": 1, "maxQuantity": 5, "discountType": "FLAT", "discountValue": 5},
    {"minQuantity": 6, "maxQuantity": 10, "discountType": "FLAT", "discountValue": 10},
]


@pytest.fixture
def client(tmp_path, monkeypatch):
    """Point the shared service at a scratch CSV seeded with one product."""
    monkeypatch.setattr(state.inventory_service, "inventory_csv_path", tmp_path / "inventory.csv")
    state.inventory_service.create_item(InventoryItem(
        item_id="PANEER-200",
        product_name="Fresh Paneer 200g",
        default_price=90.0,
        selling_price=90.0,
        enable_quantity_pricing=True,
        pricing_slabs=[PricingSlab(3, 5, DiscountType.PERCENTAGE, 10)],
    ))
    return TestClient(app)


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "online"


def test_validate_valid(client):
    response = client.post("/slabs/validate", json={"slabs": TIERED})
    assert response.status_code == 200
    assert response.json() == {"valid": True, "errors": []}


def test_validate_overlap_is_not_an_http_error(client):
    slabs = TIERED + [{"minQuantity": 8, "maxQuantity": 12, "discountType": "FLAT", "discountValue": 12}]
    response = client.post("/slabs/validate", json={"slabs": slabs})
    assert response.status_code == 200
    body = response.json()
    assert body["valid"] is False
    assert body["errors"][0]["code"] == "OverlappingRanges"
    assert body["errors"][0]["indices"] == [1, 2]


def test_quote_extended_range(client):
    response = client.post("/quote", json={"baseUnitPrice": 100, "slabs": TIERED, "quantity": 50})
    assert response.status_code == 200
    body = response.json()
    assert body["finalUnitPrice"] == 90.0
    assert body["finalTotal"] == 4500.0
    assert body["isExtendedRange"] is True


def test_quote_fails_open_on_bad_input(client):
    response = client.post("/quote", json={"baseUnitPrice": "abc", "slabs": TIERED, "quantity": "x"})
    assert response.status_code == 200
    body = response.json()
    assert body["quantity"] == 1
    assert body["finalTotal"] == 0


def test_quote_overflowing_total_is_still_200(client):
    response = client.post("/quote", json={"baseUnitPrice": 1e308, "slabs": TIERED, "quantity": 10})
    assert response.status_code == 200
    body = response.json()
    assert body["finalTotal"] == 0
    assert body["warnings"]


def test_list_and_get_items(client):
    assert [i["itemId"] for i in client.get("/api/inventory").json()] == ["PANEER-200"]
    item = client.get("/api/inventory/PANEER-200").json()
    assert item["pricingSlabs"][0]["discountType"] == "PERCENTAGE"
    assert item["isPriceOverridden"] is False


def test_get_missing_item(client):
    response = client.get("/api/inventory/NOPE")
    assert response.status_code == 404
    assert response.json()["detail"]["code"] == "ITEM_NOT_FOUND"
    assert response.json()["detail"]["itemId"] == "NOPE"


def test_update_settings(client):
    response = client.put("/api/inventory/PANEER-200", json={
        "sellingPrice": 85,
        "pricingSlabs": [{"minQuantity": 1, "maxQuantity": 5, "discountType": "FLAT", "discountValue": 5}],
    })
    assert response.status_code == 200
    body = response.json()
    assert body["sellingPrice"] == 85.0
    assert body["isPriceOverridden"] is True
    assert body["pricingSlabs"] == [
        {"minQuantity": 1, "maxQuantity": 5, "discountType": "FLAT", "discountValue": 5.0, "isActive": True}
    ]


def test_update_settings_rejected(client):
    response = client.put("/api/inventory/PANEER-200", json={
        "pricingSlabs": TIERED + [{"minQuantity": 10, "maxQuantity": 12, "discountType": "FLAT", "discountValue": 1}],
    })
    assert response.status_code == 400
    assert response.json()["detail"]["errors"] == ["Slab 2 and 3 have overlapping quantity ranges"]


def test_update_missing_item(client):
    assert client.put("/api/inventory/NOPE", json={"sellingPrice": 10}).status_code == 404


def test_item_quote(client):
    body = client.get("/api/inventory/PANEER-200/quote", params={"quantity": 4}).json()
    assert body["finalUnitPrice"] == 81.0
    assert body["finalTotal"] == 324.0
    assert body["savingsPercentage"] == 10.0


def test_item_quote_below_slabs(client):
    body = client.get("/api/inventory/PANEER-200/quote", params={"quantity": 2}).json()
    assert body["appliedSlab"] is None
    assert body["finalTotal"] == 180.0


def test_item_preview(client):
    preview = client.get("/api/inventory/PANEER-200/preview").json()
    assert preview == [{
        "slab": {"minQuantity": 3, "maxQuantity": 5, "discountType": "PERCENTAGE", "discountValue": 10, "isActive": True},
        "quantity": 3,
        "finalTotal": 243.0,
        "description": "10% off for 3-5 units",
    }]
