import os
import sys

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from catalog_pricing.engine import PricingEngine
from catalog_pricing.engine.models import (
    PriceModel,
    PriceTier,
    Product,
    RETAIL_ONLY,
    WHOLESALE_ONLY,
    SIMPLE_WHOLESALE,
    GRADUAL_WHOLESALE,
)


@pytest.fixture
def engine():
    return PricingEngine()


@pytest.fixture
def ladder():
    """Two-step ladder on a R$ 10,00 product."""
    return [
        PriceTier(tier_name="Atacarejo", min_quantity=10, price=8.00, tier_order=1),
        PriceTier(tier_name="Atacado", min_quantity=50, price=6.00, tier_order=2),
    ]


@pytest.fixture
def tiered_product(ladder):
    return Product(id="camiseta", name="Camiseta", retail_price=10.00, price_tiers=ladder)


@pytest.fixture
def legacy_product():
    """No tiers, legacy wholesale fields only."""
    return Product(id="calca", name="Calça", retail_price=10.00, wholesale_price=7.00, min_wholesale_qty=20)


@pytest.fixture
def plain_product():
    return Product(id="bone", name="Boné", retail_price=25.00)


@pytest.fixture
def models():
    """One price model per mode, keyed by a short name."""
    return {
        "retail": PriceModel(store_id="s-retail", price_model=RETAIL_ONLY),
        "simple": PriceModel(store_id="s-simple", price_model=SIMPLE_WHOLESALE),
        "cart": PriceModel(
            store_id="s-cart",
            price_model=SIMPLE_WHOLESALE,
            simple_wholesale_by_cart_total=True,
            simple_wholesale_cart_min_qty=15,
        ),
        "gradual": PriceModel(store_id="s-gradual", price_model=GRADUAL_WHOLESALE, gradual_wholesale_enabled=True),
        "wholesale": PriceModel(store_id="s-wholesale", price_model=WHOLESALE_ONLY, simple_wholesale_min_qty=6),
    }
