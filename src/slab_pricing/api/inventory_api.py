"""
Inventory API - FastAPI router for per-product pricing settings.
"""
from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel
from typing import Optional

from ..exceptions import ItemNotFoundError, SettingsValidationFailed
from .state import inventory_service, settings

router = APIRouter(prefix="/api/inventory", tags=["inventory"])


class SlabPayload(BaseModel):
    """A slab as sent by the settings form."""
    minQuantity: Optional[float] = None
    maxQuantity: Optional[float] = None
    discountType: Optional[str] = None
    discountValue: Optional[float] = None
    isActive: bool = True


class SettingsUpdate(BaseModel):
    """Request model for updating pricing settings."""
    sellingPrice: Optional[float] = None
    minStockLevel: Optional[int] = None
    maxStockLevel: Optional[int] = None
    enableQuantityPricing: Optional[bool] = None
    pricingSlabs: Optional[list[SlabPayload]] = None


# Endpoints

@router.get("")
async def list_items():
    """List all inventory records."""
    return [item.to_dict() for item in inventory_service.list_items()]


@router.get("/{item_id}")
async def get_item(item_id: str):
    """Get a single inventory record."""
    try:
        return inventory_service.get_item(item_id).to_dict()
    except ItemNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.to_dict())


@router.put("/{item_id}")
async def update_settings(item_id: str, updates: SettingsUpdate):
    """Validate and save pricing settings."""
    # Only fields present in the body are applied
    update_dict = updates.model_dump(exclude_unset=True)
    if 'pricingSlabs' in update_dict and update_dict['pricingSlabs'] is not None:
        update_dict['pricingSlabs'] = [slab.model_dump() for slab in updates.pricingSlabs]

    try:
        updated = inventory_service.update_settings(item_id, update_dict)
        return updated.to_dict()
    except ItemNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.to_dict())
    except SettingsValidationFailed as e:
        raise HTTPException(status_code=400, detail=e.to_dict())


@router.get("/{item_id}/quote")
async def quote_item(item_id: str, quantity: int = Query(1)):
    """Resolve the price of a quantity for one record."""
    try:
        return inventory_service.quote(item_id, quantity).to_dict()
    except ItemNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.to_dict())


@router.get("/{item_id}/preview")
async def preview_item(item_id: str):
    """Example prices at each slab's minimum quantity."""
    try:
        return inventory_service.preview(item_id, currency_symbol=settings.currency_symbol)
    except ItemNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.to_dict())
