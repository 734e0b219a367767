"""
Store Data Provider - read-only access to price models, products and tiers.

Loads the three store tables into pandas DataFrames and converts rows into
engine records at this boundary. Missing or malformed data never raises to
callers: price models fall back to retail-only and bad rows are skipped.
"""
import logging
from typing import Optional

import pandas as pd

from ..config.settings import Settings, get_settings
from ..engine.models import PriceModel, PriceTier, Product

logger = logging.getLogger(__name__)


PRICE_MODEL_COLUMNS = [
    'store_id', 'price_model', 'simple_wholesale_min_qty', 'simple_wholesale_name',
    'simple_wholesale_by_cart_total', 'simple_wholesale_cart_min_qty',
    'gradual_wholesale_enabled', 'minimum_purchase_enabled', 'minimum_purchase_amount',
    'minimum_purchase_message', 'show_price_tiers', 'show_savings_indicators',
    'show_next_tier_hint',
]
PRODUCT_COLUMNS = ['id', 'store_id', 'name', 'retail_price', 'wholesale_price', 'min_wholesale_qty']
TIER_COLUMNS = ['id', 'product_id', 'tier_name', 'tier_type', 'min_quantity', 'price', 'tier_order', 'is_active']


def _normalize(df: pd.DataFrame, columns: list[str]) -> pd.DataFrame:
    """Strip headers and id columns; add any missing expected columns."""
    df = df.copy()
    df.columns = [str(c).strip() for c in df.columns]
    for col in columns:
        if col not in df.columns:
            df[col] = None
    for col in ('id', 'store_id', 'product_id'):
        if col in df.columns:
            df[col] = df[col].astype(str).str.strip()
    return df


def _records(df: pd.DataFrame) -> list[dict]:
    return df.astype(object).where(pd.notna(df), None).to_dict(orient='records')


class StoreDataProvider:
    """
    Data provider for the pricing engine.

    Each instance owns its own frames; there is no module-level cache.
    Use from_csv() for file-backed data and from_records() for in-memory data.
    """

    def __init__(
        self,
        price_models: Optional[pd.DataFrame] = None,
        products: Optional[pd.DataFrame] = None,
        price_tiers: Optional[pd.DataFrame] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings
        self.price_models = _normalize(
            price_models if price_models is not None else pd.DataFrame(), PRICE_MODEL_COLUMNS
        )
        self.products = _normalize(
            products if products is not None else pd.DataFrame(), PRODUCT_COLUMNS
        )
        self.price_tiers = _normalize(
            price_tiers if price_tiers is not None else pd.DataFrame(), TIER_COLUMNS
        )

    @classmethod
    def from_csv(cls, settings: Optional[Settings] = None) -> 'StoreDataProvider':
        """Load all tables from the CSV files named in settings."""
        settings = settings or get_settings()
        return cls(
            price_models=cls._read_csv(settings.price_models_csv),
            products=cls._read_csv(settings.products_csv),
            price_tiers=cls._read_csv(settings.price_tiers_csv),
            settings=settings,
        )

    @classmethod
    def from_records(
        cls,
        price_models: Optional[list[dict]] = None,
        products: Optional[list[dict]] = None,
        price_tiers: Optional[list[dict]] = None,
    ) -> 'StoreDataProvider':
        """Build a provider from plain dict rows."""
        return cls(
            price_models=pd.DataFrame(price_models or []),
            products=pd.DataFrame(products or []),
            price_tiers=pd.DataFrame(price_tiers or []),
        )

    @staticmethod
    def _read_csv(path) -> pd.DataFrame:
        if not path.exists():
            logger.warning("Data file not found: %s", path)
            return pd.DataFrame()
        return pd.read_csv(path, dtype=str)

    def reload_data(self):
        """Reload all tables from disk (CSV-backed providers only)."""
        if self.settings is None:
            return
        fresh = self.from_csv(self.settings)
        self.price_models = fresh.price_models
        self.products = fresh.products
        self.price_tiers = fresh.price_tiers

    def get_price_model(self, store_id: str) -> PriceModel:
        """
        Resolve the store's price model.

        Returns the retail-only default when the store has no row, the row is
        invalid, or the lookup fails. Never raises.
        """
        store_id = str(store_id).strip()
        try:
            match = self.price_models[self.price_models['store_id'] == store_id]
            if match.empty:
                logger.info("No price model for store %s, using retail_only", store_id)
                return PriceModel.default(store_id)
            return PriceModel.from_record(_records(match.head(1))[0])
        except Exception:
            logger.warning("Price model lookup failed for store %s, using retail_only", store_id, exc_info=True)
            return PriceModel.default(store_id)

    def get_tiers(self, product_id: str) -> list[PriceTier]:
        """Active tiers of a product ordered by tier_order. Invalid rows are skipped."""
        product_id = str(product_id).strip()
        rows = self.price_tiers[self.price_tiers['product_id'] == product_id]

        tiers = []
        for row in _records(rows):
            try:
                tier = PriceTier.from_record(row)
            except (ValueError, TypeError) as e:
                logger.warning("Skipping invalid tier for product %s: %s", product_id, e)
                continue
            if tier.is_active:
                tiers.append(tier)

        tiers.sort(key=lambda t: t.tier_order)
        return tiers

    def get_configured_tiers(self, product_id: str) -> list[PriceTier]:
        """
        Every tier row of a product as stored, inactive and out-of-range rows
        included. Used by tier validation; pricing uses get_tiers.
        """
        product_id = str(product_id).strip()
        rows = self.price_tiers[self.price_tiers['product_id'] == product_id]

        tiers = []
        for row in _records(rows):
            try:
                tiers.append(PriceTier.from_record(row, validate=False))
            except (ValueError, TypeError) as e:
                logger.warning("Unreadable tier for product %s: %s", product_id, e)
        tiers.sort(key=lambda t: t.tier_order)
        return tiers

    def get_product(self, product_id: str) -> Optional[Product]:
        """Get a product with its active tiers, or None if missing or invalid."""
        product_id = str(product_id).strip()
        match = self.products[self.products['id'] == product_id]
        if match.empty:
            return None

        try:
            return Product.from_record(_records(match.head(1))[0], tiers=self.get_tiers(product_id))
        except (ValueError, TypeError) as e:
            logger.warning("Invalid product row %s: %s", product_id, e)
            return None

    def list_products(self, store_id: Optional[str] = None) -> list[Product]:
        """All valid products, optionally restricted to one store."""
        df = self.products
        if store_id is not None:
            df = df[df['store_id'] == str(store_id).strip()]

        products = []
        for product_id in df['id'].tolist():
            product = self.get_product(product_id)
            if product is not None:
                products.append(product)
        return products
