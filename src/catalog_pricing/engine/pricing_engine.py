"""
Pricing Engine - Resolves unit prices for catalog products and carts.

Dispatches on the store's price model:
- retail_only: retail price, no discounts
- wholesale_only: every sale is wholesale, with a store-wide minimum quantity
- simple_wholesale: one wholesale step, counted per item or on the cart total
- gradual_wholesale: progressive discount ladder per product

All calculation methods are pure over the records they receive. The optional
data provider is only used by the id-based convenience methods.
"""
import logging
from typing import Optional

from .errors import MinimumQuantityError, ProductNotFoundError
from .models import (
    CartLineItem,
    CartLineQuote,
    CartQuote,
    CurrentTier,
    PriceCalculationResult,
    PriceModel,
    PriceTier,
    Product,
    RETAIL_ONLY,
    WHOLESALE_ONLY,
    SIMPLE_WHOLESALE,
    GRADUAL_WHOLESALE,
    RETAIL_TIER_NAME,
)
from .tier_resolver import (
    TierResolution,
    effective_tiers,
    resolve_tier,
    wholesale_unit_price,
)

logger = logging.getLogger(__name__)


class PricingEngine:
    """
    Core pricing engine for store price models.

    Resolution order for a line:
    1. Pick the retail reference (cart snapshot or product retail price)
    2. Dispatch on price_model; unknown models price at retail
    3. Resolve the applicable tier and next-tier hint
    4. Record trace steps and warnings on the result
    """

    def __init__(self, provider=None):
        """
        Args:
            provider: Optional StoreDataProvider used by calculate_for/quote_cart_for
        """
        self.provider = provider

    def check_minimum_quantity(
        self,
        quantity: int,
        price_model: PriceModel,
        product_id: Optional[str] = None,
    ):
        """Raise MinimumQuantityError when a wholesale_only minimum is unmet."""
        if price_model.price_model != WHOLESALE_ONLY:
            return
        required = price_model.simple_wholesale_min_qty
        if quantity < required:
            raise MinimumQuantityError(quantity=quantity, required=required, product_id=product_id)

    def calculate(
        self,
        product: Product,
        quantity: int,
        price_model: PriceModel,
        cart_total_quantity: Optional[int] = None,
        retail_price: Optional[float] = None,
        enforce_minimum: bool = True,
    ) -> PriceCalculationResult:
        """
        Calculate the unit price of a product at a quantity.

        Args:
            product: Product record (tiers attached)
            quantity: Line quantity
            price_model: Store price model
            cart_total_quantity: Units across the whole cart (cart-total mode)
            retail_price: Retail snapshot overriding product.retail_price
            enforce_minimum: Raise on unmet wholesale_only minimum instead of flagging

        Returns:
            PriceCalculationResult with price, discount and next-tier hint
        """
        retail = retail_price if retail_price and retail_price > 0 else product.retail_price
        quantity = max(0, int(quantity))
        mode = price_model.price_model

        if mode == WHOLESALE_ONLY:
            if enforce_minimum:
                self.check_minimum_quantity(quantity, price_model, product.id)
            result = self._wholesale_only(product, quantity, price_model, retail)
        elif mode == SIMPLE_WHOLESALE and price_model.simple_wholesale_by_cart_total:
            cart_quantity = cart_total_quantity if cart_total_quantity is not None else quantity
            result = self._cart_total(product, quantity, cart_quantity, price_model, retail)
        elif mode in (SIMPLE_WHOLESALE, GRADUAL_WHOLESALE):
            result = self._per_item(product, quantity, price_model, retail)
        else:
            result = self._retail(quantity, retail, mode)
            if mode != RETAIL_ONLY:
                logger.warning("Unknown price model %r for store %s; pricing at retail", mode, price_model.store_id)
                result.add_warning(f"Unknown price model '{mode}', retail price used")

        result.add_trace(
            "Result",
            f"{result.current_tier.tier_name}, {result.percentage}% off retail",
            f"{result.price:.2f}",
        )
        return result

    def _retail(self, quantity: int, retail: float, mode: str) -> PriceCalculationResult:
        result = PriceCalculationResult(
            price=retail,
            percentage=0,
            current_tier=CurrentTier(tier_name=RETAIL_TIER_NAME, price=retail),
            retail_price=retail,
            quantity=quantity,
            price_model=mode,
        )
        result.add_trace("Price Model", "Retail pricing", mode)
        return result

    def _per_item(
        self,
        product: Product,
        quantity: int,
        price_model: PriceModel,
        retail: float,
    ) -> PriceCalculationResult:
        tiers = effective_tiers(product)
        resolution = resolve_tier(tiers, quantity, retail)

        result = self._from_resolution(resolution, quantity, retail, price_model.price_model)
        result.add_trace("Price Model", "Per-item tier pricing", price_model.price_model)
        result.add_trace("Tiers", f"{len(tiers)} active tier(s) for {product.id}", None)
        if not tiers:
            result.add_trace("Fallback", "No tiers configured, retail price used", None)
        return result

    def _cart_total(
        self,
        product: Product,
        quantity: int,
        cart_quantity: int,
        price_model: PriceModel,
        retail: float,
    ) -> PriceCalculationResult:
        wholesale = wholesale_unit_price(product)
        threshold = price_model.simple_wholesale_cart_min_qty

        tiers = []
        if wholesale is not None:
            tiers.append(PriceTier(
                tier_name=price_model.simple_wholesale_name,
                tier_type="simple",
                min_quantity=threshold,
                price=wholesale,
            ))

        resolution = resolve_tier(tiers, cart_quantity, retail)
        result = self._from_resolution(resolution, quantity, retail, price_model.price_model)
        result.add_trace("Price Model", "Wholesale by cart total", price_model.price_model)
        result.add_trace("Cart Quantity", f"Cart has {cart_quantity} unit(s), threshold {threshold}", str(cart_quantity))
        if wholesale is None:
            result.add_trace("Fallback", f"No wholesale price for {product.id}, retail price used", None)
        return result

    def _wholesale_only(
        self,
        product: Product,
        quantity: int,
        price_model: PriceModel,
        retail: float,
    ) -> PriceCalculationResult:
        required = price_model.simple_wholesale_min_qty
        base = wholesale_unit_price(product) or retail

        resolution = resolve_tier(
            effective_tiers(product),
            quantity,
            retail,
            base_price=base,
            base_name=price_model.simple_wholesale_name,
        )
        result = self._from_resolution(resolution, quantity, retail, price_model.price_model)
        result.add_trace("Price Model", f"Wholesale only, minimum {required}", price_model.price_model)

        if quantity < required:
            result.minimum_met = False
            result.add_warning(
                f"{product.name}: minimum of {required} unit(s) required, {quantity} in cart"
            )
        return result

    def _from_resolution(
        self,
        resolution: TierResolution,
        quantity: int,
        retail: float,
        mode: str,
    ) -> PriceCalculationResult:
        result = PriceCalculationResult(
            price=resolution.price,
            percentage=resolution.percentage,
            current_tier=resolution.current_tier,
            retail_price=retail,
            quantity=quantity,
            price_model=mode,
            next_tier_hint=resolution.next_tier_hint,
        )
        if resolution.matched_tier is not None:
            result.add_trace(
                "Tier Match",
                f"Quantity reached {resolution.matched_tier.tier_name}",
                str(resolution.matched_tier.min_quantity),
            )
        if resolution.next_tier_hint is not None:
            hint = resolution.next_tier_hint
            result.add_trace(
                "Next Tier",
                f"{hint.quantity_needed} more for {hint.next_tier_name}",
                f"{hint.potential_savings:.2f}",
            )
        return result

    def quote_cart(self, lines: list[CartLineItem], price_model: PriceModel) -> CartQuote:
        """
        Price every cart line under one price model.

        Lines below a wholesale_only minimum are flagged instead of raising,
        so the cart can still be displayed; the quote reports checkout_blocked.
        """
        quote = CartQuote(store_id=price_model.store_id, price_model=price_model.price_model)
        cart_total_quantity = sum(line.quantity for line in lines)

        for line in lines:
            result = self.calculate(
                line.product,
                line.quantity,
                price_model,
                cart_total_quantity=cart_total_quantity,
                retail_price=line.original_price,
                enforce_minimum=False,
            )
            quote.lines.append(CartLineQuote(line=line, result=result))

            for warning in result.warnings:
                quote.add_warning(warning)

        logger.debug(
            "Quoted %d line(s) for store %s: total %.2f",
            len(quote.lines), quote.store_id, quote.total,
        )
        return quote

    def calculate_for(
        self,
        store_id: str,
        product_id: str,
        quantity: int,
        cart_total_quantity: Optional[int] = None,
    ) -> PriceCalculationResult:
        """Calculate by ids, loading records through the provider."""
        product = self._require_product(product_id)
        price_model = self.provider.get_price_model(store_id)
        return self.calculate(product, quantity, price_model, cart_total_quantity=cart_total_quantity)

    def quote_cart_for(self, store_id: str, items: list[dict]) -> CartQuote:
        """
        Quote a cart given as dicts with product_id, quantity and optional original_price.
        """
        lines = [
            CartLineItem(
                product=self._require_product(item['product_id']),
                quantity=int(item['quantity']),
                original_price=item.get('original_price'),
            )
            for item in items
        ]
        return self.quote_cart(lines, self.provider.get_price_model(store_id))

    def _require_product(self, product_id: str) -> Product:
        if self.provider is None:
            raise RuntimeError("PricingEngine has no data provider")
        product = self.provider.get_product(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product
