"""
Catalog API - FastAPI router for store price models and product tiers.
"""
from fastapi import APIRouter, HTTPException
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel
from typing import Optional

from ..engine.tier_resolver import effective_tiers
from ..services.formatting import describe_price_model
from ..services.tier_validation import validate_tiers
from . import state

router = APIRouter(prefix="/api", tags=["catalog"])


# Pydantic models for API
class PriceModelResponse(BaseModel):
    """Response model for a store price model."""
    store_id: str
    price_model: str
    simple_wholesale_min_qty: int
    simple_wholesale_name: str
    simple_wholesale_by_cart_total: bool
    simple_wholesale_cart_min_qty: int
    gradual_wholesale_enabled: bool
    minimum_purchase_enabled: bool
    minimum_purchase_amount: float
    minimum_purchase_message: str
    show_price_tiers: bool
    show_savings_indicators: bool
    show_next_tier_hint: bool


class BannerResponse(BaseModel):
    """Response model for the catalog banner."""
    store_id: str
    price_model: str
    banner: Optional[dict]


class TierResponse(BaseModel):
    """Response model for a price tier."""
    id: Optional[str]
    tier_name: str
    tier_type: str
    min_quantity: int
    price: float
    tier_order: int
    is_active: bool


class ValidationResponse(BaseModel):
    """Response model for tier validation."""
    valid: bool
    errors: list[str]
    warnings: list[str]
    active_tiers: int


# Endpoints

@router.get("/stores/{store_id}/price-model", response_model=PriceModelResponse)
async def get_price_model(store_id: str):
    """Get the store's price model (retail_only when not configured)."""
    price_model = state.provider.get_price_model(store_id)
    return PriceModelResponse(**jsonable_encoder(price_model))


@router.get("/stores/{store_id}/banner", response_model=BannerResponse)
async def get_banner(store_id: str):
    """Get catalog banner copy for the store's price model."""
    price_model = state.provider.get_price_model(store_id)
    return BannerResponse(
        store_id=price_model.store_id,
        price_model=price_model.price_model,
        banner=describe_price_model(price_model),
    )


@router.get("/products/{product_id}/tiers", response_model=list[TierResponse])
async def get_tiers(product_id: str):
    """
    Get a product's effective tiers, including the derived legacy tier.

    Empty when the product's store hides its price tiers.
    """
    product = state.provider.get_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail=f"Product '{product_id}' not found")
    if product.store_id and not state.provider.get_price_model(product.store_id).show_price_tiers:
        return []
    return [TierResponse(**jsonable_encoder(t)) for t in effective_tiers(product)]


@router.get("/products/{product_id}/tiers/validation", response_model=ValidationResponse)
async def validate_product_tiers(product_id: str):
    """Validate a product's configured tier ladder."""
    product = state.provider.get_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail=f"Product '{product_id}' not found")

    result = validate_tiers(
        state.provider.get_configured_tiers(product_id),
        retail_price=product.retail_price,
    )
    return ValidationResponse(
        valid=result.valid,
        errors=result.errors,
        warnings=result.warnings,
        active_tiers=result.active_tiers,
    )


@router.post("/reload")
async def reload_data():
    """Reload store data from disk."""
    state.provider.reload_data()
    return {
        "success": True,
        "products": len(state.provider.products),
        "price_models": len(state.provider.price_models),
    }
