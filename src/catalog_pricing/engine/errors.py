"""Exceptions raised by the pricing engine."""
from typing import Optional


class PricingError(ValueError):
    """Base class for pricing errors callers are expected to handle."""


class MinimumQuantityError(PricingError):
    """Quantity is below the store's wholesale-only minimum."""

    def __init__(self, quantity: int, required: int, product_id: Optional[str] = None):
        self.quantity = quantity
        self.required = required
        self.product_id = product_id
        target = f" for product {product_id}" if product_id else ""
        super().__init__(
            f"Quantity {quantity}{target} is below the wholesale minimum of {required}"
        )

    @property
    def quantity_needed(self) -> int:
        return self.required - self.quantity


class ProductNotFoundError(LookupError):
    """Product id is not present in the catalog."""

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product '{product_id}' not found")
