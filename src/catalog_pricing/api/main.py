import logging
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from catalog_pricing import __version__
from catalog_pricing.config.logging_config import configure_logging
from catalog_pricing.config.settings import get_settings
from catalog_pricing.engine import (
    PriceModel,
    MinimumQuantityError,
    ProductNotFoundError,
    compute_tier_progress,
)
from catalog_pricing.policy.minimum_purchase import validate_minimum_purchase
from catalog_pricing.services.formatting import format_brl
from catalog_pricing.api.catalog_api import router as catalog_router
from catalog_pricing.api import state

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Catalog Pricing API",
    description="Tiered and wholesale pricing for storefront catalogs",
    version=__version__
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(get_settings().cors_origins),
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(catalog_router)


class CalcRequest(BaseModel):
    store_id: str
    product_id: str
    quantity: int = Field(ge=0)
    cart_total_quantity: Optional[int] = Field(default=None, ge=0)


class CartItemRequest(BaseModel):
    product_id: str
    quantity: int = Field(ge=1)
    original_price: Optional[float] = Field(default=None, gt=0)


class CartRequest(BaseModel):
    store_id: str
    items: list[CartItemRequest]


def _result_payload(result, price_model: PriceModel) -> dict:
    payload = jsonable_encoder(result)
    payload.update({
        "total": result.total,
        "savings": result.savings,
        "is_wholesale": result.is_wholesale,
        "formatted_price": format_brl(result.price),
        "formatted_total": format_brl(result.total),
        "formatted_savings": format_brl(result.savings),
    })
    # Store display switches
    if not price_model.show_next_tier_hint:
        payload["next_tier_hint"] = None
    if not price_model.show_savings_indicators:
        payload["savings"] = None
        payload["formatted_savings"] = None
    return payload


@app.get("/")
async def root():
    return {"status": "online", "message": "Catalog Pricing API Active"}


@app.post("/calculate")
async def calculate_price(req: CalcRequest):
    try:
        result = state.engine.calculate_for(
            store_id=req.store_id,
            product_id=req.product_id,
            quantity=req.quantity,
            cart_total_quantity=req.cart_total_quantity,
        )
        return _result_payload(result, state.provider.get_price_model(req.store_id))
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except MinimumQuantityError as e:
        raise HTTPException(status_code=422, detail={
            "message": str(e),
            "quantity": e.quantity,
            "required": e.required,
            "quantity_needed": e.quantity_needed,
        })


@app.post("/cart/quote")
async def quote_cart(req: CartRequest):
    try:
        quote = state.engine.quote_cart_for(
            req.store_id,
            [item.model_dump() for item in req.items],
        )
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    price_model = state.provider.get_price_model(req.store_id)
    minimum = validate_minimum_purchase(price_model, quote.total)

    summary = quote.to_summary_dict()
    summary["formatted_total"] = format_brl(quote.total)
    summary["formatted_savings"] = format_brl(quote.savings)
    summary["tier_progress"] = None
    if price_model.show_next_tier_hint:
        summary["tier_progress"] = jsonable_encoder(compute_tier_progress(quote, price_model))
    if not price_model.show_savings_indicators:
        summary["savings"] = None
        summary["formatted_savings"] = None
    summary["minimum_purchase"] = {
        **jsonable_encoder(minimum),
        "can_proceed": minimum.can_proceed,
        "amount_missing": minimum.amount_missing,
    }
    summary["can_checkout"] = minimum.can_proceed and not quote.checkout_blocked
    logger.info(
        "Cart quote for store %s: %d item(s), total %.2f",
        req.store_id, quote.total_items, quote.total,
    )
    return summary


@app.get("/system/status")
async def get_status():
    settings = get_settings()
    return {
        "engine_active": True,
        "data_dir": str(settings.data_dir),
        "stores_loaded": len(state.provider.price_models),
        "products_loaded": len(state.provider.products),
        "tiers_loaded": len(state.provider.price_tiers),
    }
