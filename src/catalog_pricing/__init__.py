"""
Catalog Pricing Package

Tiered and wholesale pricing for multi-tenant storefront catalogs.
Resolves Store Price Model → Product Tiers → Unit Price with retail fallback.
"""

__version__ = "1.0.0"
