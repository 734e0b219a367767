"""
Tier Validation - checks a product's tier ladder before it is shown to admins.

The engine tolerates bad ladders; this module reports them.
"""
from dataclasses import dataclass, field
from typing import Optional

from ..engine.models import PriceTier
from ..engine.tier_resolver import sort_tiers


@dataclass
class ValidationResult:
    """Result of tier validation."""
    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    active_tiers: int = 0


def validate_tiers(tiers: list[PriceTier], retail_price: Optional[float] = None) -> ValidationResult:
    """
    Validate a tier ladder.

    Errors: non-positive prices, thresholds below 1.
    Warnings: duplicate thresholds, tier_order disagreeing with thresholds,
    prices rising with quantity, tiers not cheaper than retail.
    """
    result = ValidationResult(valid=True)
    active = [t for t in tiers if t.is_active]
    result.active_tiers = len(active)

    for tier in active:
        if tier.price <= 0:
            result.errors.append(f"Tier '{tier.tier_name}' must have a price above zero")
            result.valid = False
        if tier.min_quantity < 1:
            result.errors.append(f"Tier '{tier.tier_name}' must start at quantity 1 or more")
            result.valid = False
        if retail_price is not None and tier.price >= retail_price:
            result.warnings.append(
                f"Tier '{tier.tier_name}' price {tier.price:.2f} is not below retail {retail_price:.2f}"
            )

    ordered = sort_tiers(active)
    for previous, tier in zip(ordered, ordered[1:]):
        if tier.min_quantity == previous.min_quantity:
            result.warnings.append(
                f"Tiers '{previous.tier_name}' and '{tier.tier_name}' share min_quantity "
                f"{tier.min_quantity}; '{previous.tier_name}' takes precedence"
            )
        if tier.price > previous.price:
            result.warnings.append(
                f"Tier '{tier.tier_name}' costs more than '{previous.tier_name}' "
                f"despite a higher quantity threshold"
            )

    by_order = sorted(active, key=lambda t: t.tier_order)
    if [t.min_quantity for t in by_order] != [t.min_quantity for t in ordered]:
        result.warnings.append("tier_order does not follow min_quantity; thresholds are used")

    return result
