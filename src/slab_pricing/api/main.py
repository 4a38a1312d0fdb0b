from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from typing import Any, Optional

from ..engine import resolve_price, validate_slabs
from ..logging_setup import configure_logging, is_configured
from .inventory_api import router as inventory_router
from .state import settings

if not is_configured():
    configure_logging(settings.log_level)

app = FastAPI(
    title="Slab Pricing API",
    description="Quantity slab validation and price resolution for the storefront",
    version="1.0.0"
)

# Enable CORS for the mobile app during development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include inventory settings API
app.include_router(inventory_router)


class ValidateRequest(BaseModel):
    slabs: list[dict[str, Any]] = []


class QuoteRequest(BaseModel):
    baseUnitPrice: Optional[Any] = 0
    slabs: list[dict[str, Any]] = []
    quantity: Optional[Any] = 1
    enabled: bool = True


@app.get("/")
async def root():
    return {"status": "online", "message": "Slab Pricing API Active"}


@app.post("/slabs/validate")
async def validate(req: ValidateRequest):
    # Validation problems are data, not HTTP errors
    return validate_slabs(req.slabs).to_dict()


@app.post("/quote")
async def quote(req: QuoteRequest):
    result = resolve_price(req.baseUnitPrice, req.slabs, req.quantity, enabled=req.enabled)
    return result.to_dict()
