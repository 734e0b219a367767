"""
Tier Resolver - Selects the quantity tier that applies to a line.

Given a product's tier ladder and a quantity, finds the highest tier whose
threshold has been reached and the next cheaper tier still ahead of the buyer.
"""
import math
from dataclasses import dataclass
from typing import Optional

from .models import (
    PriceTier,
    Product,
    CurrentTier,
    NextTierHint,
    RETAIL_TIER_NAME,
    SIMPLE_WHOLESALE_TIER_NAME,
)


@dataclass
class TierResolution:
    """Outcome of resolving a quantity against a tier ladder."""
    current_tier: CurrentTier
    percentage: int
    matched_tier: Optional[PriceTier] = None
    next_tier: Optional[PriceTier] = None
    next_tier_hint: Optional[NextTierHint] = None

    @property
    def price(self) -> float:
        return self.current_tier.price


def sort_tiers(tiers: list[PriceTier]) -> list[PriceTier]:
    """Order tiers by threshold; tier_order only breaks ties."""
    return sorted(tiers, key=lambda t: (t.min_quantity, t.tier_order))


def derive_simple_wholesale_tier(product: Product) -> Optional[PriceTier]:
    """
    Build the read-time "Atacado Simples" tier from legacy product fields.

    Only derived when both wholesale_price and min_wholesale_qty are set and
    the wholesale price is actually cheaper than retail.
    """
    wholesale_price = product.wholesale_price
    min_qty = product.min_wholesale_qty

    if not wholesale_price or not min_qty or min_qty < 1:
        return None
    if wholesale_price <= 0 or wholesale_price >= product.retail_price:
        return None

    return PriceTier(
        id="simple-wholesale-tier",
        product_id=product.id,
        tier_name=SIMPLE_WHOLESALE_TIER_NAME,
        tier_type="simple",
        min_quantity=min_qty,
        price=wholesale_price,
        tier_order=1,
        is_active=True,
    )


def effective_tiers(product: Product) -> list[PriceTier]:
    """Active tiers of the product, falling back to the derived legacy tier."""
    tiers = [t for t in product.price_tiers if t.is_active]
    if tiers:
        return sort_tiers(tiers)

    derived = derive_simple_wholesale_tier(product)
    return [derived] if derived else []


def wholesale_unit_price(product: Product) -> Optional[float]:
    """Entry-level wholesale price of a product, or None when it has none."""
    tiers = effective_tiers(product)
    if tiers:
        return tiers[0].price
    if product.wholesale_price and 0 < product.wholesale_price < product.retail_price:
        return product.wholesale_price
    return None


def discount_percentage(price: float, retail_price: float) -> int:
    """Whole-number discount against retail, rounded half up and never negative."""
    if retail_price <= 0:
        return 0
    percentage = (1 - price / retail_price) * 100
    return max(0, math.floor(percentage + 0.5))


def resolve_tier(
    tiers: list[PriceTier],
    quantity: int,
    retail_price: float,
    base_price: Optional[float] = None,
    base_name: str = RETAIL_TIER_NAME,
) -> TierResolution:
    """
    Resolve the applicable tier for a quantity.

    Args:
        tiers: Tier ladder in any order; inactive or non-positive tiers are skipped
        quantity: Units being priced (thresholds are inclusive)
        retail_price: Reference price for the discount percentage
        base_price: Price when no tier qualifies (defaults to retail)
        base_name: Tier name when no tier qualifies

    Returns:
        TierResolution with the current tier, percentage and next-tier hint
    """
    base = base_price if base_price and base_price > 0 else retail_price
    ladder = sort_tiers([t for t in tiers if t.is_active and t.price > 0])

    matched: Optional[PriceTier] = None

    for tier in ladder:
        if tier.min_quantity <= quantity:
            # Equal thresholds keep the first one seen (lowest tier_order)
            if matched is None or tier.min_quantity > matched.min_quantity:
                matched = tier

    if matched is not None:
        current = CurrentTier(
            tier_name=matched.tier_name or base_name,
            price=matched.price,
            min_quantity=matched.min_quantity,
        )
    else:
        current = CurrentTier(tier_name=base_name, price=base, min_quantity=1)

    # First unreached tier that beats the current price; a wholesale base
    # price may already equal the entry tier's price
    next_tier = next(
        (t for t in ladder if t.min_quantity > quantity and t.price < current.price),
        None,
    )

    hint = None
    if next_tier is not None:
        quantity_needed = next_tier.min_quantity - quantity
        potential_savings = round(current.price - next_tier.price, 2)
        if quantity_needed > 0 and potential_savings > 0:
            hint = NextTierHint(
                quantity_needed=quantity_needed,
                next_tier_name=next_tier.tier_name,
                potential_savings=potential_savings,
                next_quantity=next_tier.min_quantity,
            )

    return TierResolution(
        current_tier=current,
        percentage=discount_percentage(current.price, retail_price),
        matched_tier=matched,
        next_tier=next_tier,
        next_tier_hint=hint,
    )
