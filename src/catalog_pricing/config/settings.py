"""
Centralized settings and path configuration for the pricing service.
"""
import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional


DATA_DIR_ENV = 'CATALOG_PRICING_DATA_DIR'
LOG_LEVEL_ENV = 'CATALOG_PRICING_LOG_LEVEL'


def get_package_data_dir() -> Path:
    """Directory holding the bundled sample data."""
    return Path(__file__).resolve().parent.parent / 'data'


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Data source directory
    data_dir: Path

    # Input files
    price_models_csv: Path
    products_csv: Path
    price_tiers_csv: Path

    log_level: str = 'INFO'

    # Allowed CORS origins for the API
    cors_origins: tuple = ('*',)

    @classmethod
    def load(cls, data_dir: Optional[Path] = None) -> 'Settings':
        """Load settings from the environment, falling back to packaged data."""
        env_dir = os.environ.get(DATA_DIR_ENV)
        root = Path(data_dir or env_dir or get_package_data_dir())

        origins = os.environ.get('CATALOG_PRICING_CORS_ORIGINS', '*')

        return cls(
            data_dir=root,
            price_models_csv=root / 'store_price_models.csv',
            products_csv=root / 'products.csv',
            price_tiers_csv=root / 'product_price_tiers.csv',
            log_level=os.environ.get(LOG_LEVEL_ENV, 'INFO').upper(),
            cors_origins=tuple(o.strip() for o in origins.split(',') if o.strip()),
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings
