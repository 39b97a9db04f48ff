"""
Storefront Service - product aggregation across creator storefront platforms.

This package fetches products from merchandise, marketplace and membership
platforms, validates each upstream payload, and serves one ordered product
list in a unified shape alongside per-source brand data.
"""

__version__ = "0.1.0"
