"""Connector for the product search backend.

Search text is sanitized before it is encoded into the ``q`` parameter, so
nothing reaches the transport layer without passing the sanitizer.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Union
from urllib.parse import quote

from .core.config import get_api_config, get_max_query_length, get_search_config
from .core.network import make_request
from .model import ProductItem, ProductPrice, map_product
from .query_helpers import build_query_string
from .sanitize import sanitize_query

logger = logging.getLogger(__name__)


def build_products_path(
    q: str,
    page: Optional[int] = None,
    sort: Optional[str] = None,
    max_len: Optional[int] = None,
) -> Optional[str]:
    """Return the search request path for ``q``, or None if nothing survives sanitization.

    ``max_len`` overrides the configured ``sanitizer.max_len`` when given.
    """
    if max_len is None:
        max_len = get_max_query_length()
    clean = sanitize_query(q, max_len=max_len)
    if not clean:
        return None
    qs = build_query_string({"q": clean, "page": page, "sort": sort})
    return f"{get_api_config()['products_path']}{qs}"


def search_products(
    q: str,
    page: Optional[int] = None,
    sort: Optional[str] = None,
    max_len: Optional[int] = None,
) -> List[ProductItem]:
    """Search products by free text.

    Args:
        q: Raw user input
        page: Optional page number
        sort: Optional sort key
        max_len: Sanitized query length limit; defaults to the configured one

    Returns:
        Matching products; empty when the query sanitizes to nothing or the request fails
    """
    path = build_products_path(q, page=page, sort=sort, max_len=max_len)
    if path is None:
        return []

    logger.info("Searching products: %s", path)
    data = make_request(path)
    if not isinstance(data, list):
        if data is not None:
            logger.warning("Unexpected product search payload type: %s", type(data).__name__)
        return []

    return [map_product(d) for d in data if isinstance(d, dict)]


def get_product_price(product_id: Union[int, str]) -> Optional[ProductPrice]:
    """Fetch the price label for one store product.

    Args:
        product_id: Store-specific product id

    Returns:
        ProductPrice, or None if the backend did not return a JSON object
    """
    pid = str(product_id)
    path = f"{get_api_config()['products_path']}/{quote(pid, safe='')}"
    data = make_request(path)
    if not isinstance(data, dict):
        return None

    currency = data.get("currency") or get_search_config()["default_currency"]
    return ProductPrice(product_id=pid, raw=str(data.get("price") or ""), currency=str(currency))
