#!/usr/bin/env python
"""
Data check - validates every product's tier ladder and store price model.

Usage:
    python scripts/check_tiers.py
"""
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from catalog_pricing.config.logging_config import configure_logging
from catalog_pricing.engine.models import PRICE_MODELS
from catalog_pricing.services.store_data import StoreDataProvider
from catalog_pricing.services.tier_validation import validate_tiers


def main():
    configure_logging()
    provider = StoreDataProvider.from_csv()

    print("=" * 60)
    print("CATALOG PRICING DATA CHECK")
    print("=" * 60)
    print()

    failures = 0

    print("[1/2] Store price models...")
    for store_id in provider.price_models['store_id'].tolist():
        price_model = provider.get_price_model(store_id)
        if price_model.price_model not in PRICE_MODELS:
            print(f"  WARNING {store_id}: unknown model '{price_model.price_model}', retail pricing applies")
        else:
            print(f"  {store_id}: {price_model.price_model}")

    print()
    print("[2/2] Product tiers...")
    for product in provider.list_products():
        result = validate_tiers(provider.get_configured_tiers(product.id), retail_price=product.retail_price)
        status = "OK" if result.valid else "INVALID"
        print(f"  {product.id}: {status} ({result.active_tiers} active tier(s))")
        for error in result.errors:
            print(f"    ERROR: {error}")
        for warning in result.warnings:
            print(f"    WARNING: {warning}")
        if not result.valid:
            failures += 1

    print()
    if failures:
        print(f"{failures} product(s) with invalid tiers")
        sys.exit(1)
    print("All tier ladders valid")


if __name__ == "__main__":
    main()
