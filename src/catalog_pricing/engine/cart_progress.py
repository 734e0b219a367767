"""
Cart tier progress - aggregates per-line next-tier hints into one cart view.

Drives the "add N more items to reach the next discount" progress bar.
"""
from dataclasses import dataclass, field
from typing import Optional

from .models import CartQuote, PriceModel, SIMPLE_WHOLESALE


@dataclass
class ProductTierProgress:
    """How far one cart line is from its next tier."""
    product_id: str
    product_name: str
    quantity: int
    current_tier_name: str
    percentage: int
    next_tier_name: Optional[str] = None
    next_quantity: Optional[int] = None
    items_needed: int = 0
    savings: float = 0.0

    @property
    def at_max_tier(self) -> bool:
        return self.next_tier_name is None


@dataclass
class CartTierProgress:
    """Cart-wide tier progress summary."""
    total_items: int = 0
    items_to_next_tier: int = 0
    next_tier_savings: float = 0.0
    current_tier_level: Optional[str] = None
    next_tier_level: Optional[str] = None
    progress_percentage: float = 0.0
    max_discount_reached: bool = False
    products: dict[str, ProductTierProgress] = field(default_factory=dict)

    @property
    def has_progress(self) -> bool:
        return bool(self.products)


def clamp_percentage(value: float) -> float:
    return max(0.0, min(100.0, value))


def _cart_threshold(price_model: Optional[PriceModel]) -> Optional[int]:
    """Cart-wide unit threshold when wholesale is counted on the cart total."""
    if price_model is None:
        return None
    if price_model.price_model == SIMPLE_WHOLESALE and price_model.simple_wholesale_by_cart_total:
        return price_model.simple_wholesale_cart_min_qty
    return None


def compute_tier_progress(quote: CartQuote, price_model: Optional[PriceModel] = None) -> CartTierProgress:
    """
    Summarize tier progress for every line of a priced cart.

    Lines for the same product are merged (quantities added, the first
    line's tier data kept). Lines with no discount and no next tier carry
    no tier data and are left out, so retail-only carts yield an empty
    summary, as do empty carts.

    When price_model counts wholesale on the cart total, every line shares
    one threshold: the items still needed are counted once for the cart and
    savings apply to each product's current quantity.
    """
    progress = CartTierProgress(total_items=quote.total_items)
    if not quote.lines:
        return progress

    threshold = _cart_threshold(price_model)

    for line_quote in quote.lines:
        result = line_quote.result
        product = line_quote.line.product
        hint = result.next_tier_hint

        existing = progress.products.get(product.id)
        if existing is not None:
            existing.quantity += line_quote.line.quantity
            continue
        if hint is None and result.percentage == 0:
            continue

        entry = ProductTierProgress(
            product_id=product.id,
            product_name=product.name,
            quantity=line_quote.line.quantity,
            current_tier_name=result.current_tier.tier_name,
            percentage=result.percentage,
        )
        if hint is not None:
            entry.next_tier_name = hint.next_tier_name
            entry.next_quantity = hint.next_quantity
            entry.items_needed = hint.quantity_needed
            entry.savings = hint.potential_savings
        progress.products[product.id] = entry

    if not progress.products:
        return progress

    lagging = [p for p in progress.products.values() if not p.at_max_tier]

    if not lagging:
        best = max(progress.products.values(), key=lambda p: p.percentage)
        progress.current_tier_level = best.current_tier_name
        progress.max_discount_reached = True
        progress.progress_percentage = 100.0
        return progress

    # entry.savings holds the unit saving until here
    for p in lagging:
        units = p.quantity if threshold is not None else p.next_quantity
        p.savings = round(p.savings * units, 2)

    # The cart's level is that of its least discounted line
    lowest = min(lagging, key=lambda p: p.percentage)
    progress.current_tier_level = lowest.current_tier_name
    progress.next_tier_level = lowest.next_tier_name
    if threshold is not None:
        progress.items_to_next_tier = max(0, threshold - progress.total_items)
    else:
        progress.items_to_next_tier = sum(p.items_needed for p in lagging)
    progress.next_tier_savings = round(sum(p.savings for p in lagging), 2)

    denominator = progress.total_items + progress.items_to_next_tier
    if denominator > 0:
        progress.progress_percentage = clamp_percentage(progress.total_items / denominator * 100)

    return progress
