"""Engine subpackage - core pricing logic and tier resolution."""
from .pricing_engine import PricingEngine
from .models import PriceModel, PriceTier, Product, CartLineItem, PriceCalculationResult, CartQuote
from .errors import PricingError, MinimumQuantityError, ProductNotFoundError
from .cart_progress import compute_tier_progress, CartTierProgress

__all__ = [
    'PricingEngine', 'PriceModel', 'PriceTier', 'Product', 'CartLineItem',
    'PriceCalculationResult', 'CartQuote', 'PricingError', 'MinimumQuantityError',
    'ProductNotFoundError', 'compute_tier_progress', 'CartTierProgress',
]
