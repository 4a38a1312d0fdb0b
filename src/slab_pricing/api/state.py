"""Shared service instances for the API routers."""
from ..config.settings import get_settings
from ..services.inventory_service import InventoryService

settings = get_settings()
inventory_service = InventoryService(settings.inventory_csv)
