"""
Minimum Purchase Policy - order value floor for wholesale stores.
"""
from dataclasses import dataclass

from ..engine.models import PriceModel, DEFAULT_MINIMUM_PURCHASE_MESSAGE
from ..services.formatting import format_brl


@dataclass
class MinimumPurchaseValidation:
    """Whether a cart amount satisfies the store's minimum order value."""
    is_enabled: bool
    is_wholesale_mode: bool
    minimum_amount: float
    current_amount: float
    is_minimum_met: bool
    message: str = ""
    formatted_message: str = ""

    @property
    def can_proceed(self) -> bool:
        return self.is_minimum_met

    @property
    def amount_missing(self) -> float:
        return round(max(0.0, self.minimum_amount - self.current_amount), 2)


def validate_minimum_purchase(price_model: PriceModel, cart_amount: float) -> MinimumPurchaseValidation:
    """
    Check a cart total against the store's minimum purchase.

    The minimum only applies to wholesale modes with the option enabled;
    otherwise checkout may always proceed.
    """
    if not price_model.minimum_purchase_enabled or not price_model.is_wholesale_mode:
        return MinimumPurchaseValidation(
            is_enabled=False,
            is_wholesale_mode=price_model.is_wholesale_mode,
            minimum_amount=0.0,
            current_amount=cart_amount,
            is_minimum_met=True,
        )

    minimum = price_model.minimum_purchase_amount or 0.0
    message = price_model.minimum_purchase_message or DEFAULT_MINIMUM_PURCHASE_MESSAGE

    return MinimumPurchaseValidation(
        is_enabled=True,
        is_wholesale_mode=True,
        minimum_amount=minimum,
        current_amount=cart_amount,
        is_minimum_met=cart_amount >= minimum,
        message=message,
        formatted_message=message.replace("{amount}", format_brl(minimum)),
    )
