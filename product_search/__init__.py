"""Product search client package.

Key modules:
- sanitize: Free-text query sanitization (length cap, comment/metachar/keyword stripping)
- query_helpers: Percent-encoded query string building
- model: ProductItem/ProductPrice dataclasses and DTO mapping
- products_api: Product search and price lookup against the backend
- core: Config, network session and debounce utilities

Usage:
    from product_search import sanitize_query, build_query_string
    from product_search.products_api import search_products
"""

from .model import ProductItem, ProductPrice, map_product
from .query_helpers import build_query_string, build_search_url, encode_query_param
from .sanitize import sanitize_query

__all__ = [
    "ProductItem",
    "ProductPrice",
    "map_product",
    "build_query_string",
    "build_search_url",
    "encode_query_param",
    "sanitize_query",
]
