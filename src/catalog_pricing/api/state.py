"""
Shared API state: one data provider and engine per process.
"""
from ..config.settings import get_settings
from ..engine import PricingEngine
from ..services.store_data import StoreDataProvider

provider = StoreDataProvider.from_csv(get_settings())
engine = PricingEngine(provider=provider)
