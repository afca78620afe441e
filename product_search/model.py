"""Data models for the product search client.

Provides the ProductItem and ProductPrice dataclasses and the mapping from
backend DTO dictionaries to them.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class ProductItem:
    """A product returned by the search endpoint.

    Attributes:
        name: Product display name
        available_stores: Store names carrying the product
        store_id_map: Store name -> store-specific product id
        image_url: Product image, if the backend provides one
    """

    name: str
    available_stores: List[str] = field(default_factory=list)
    store_id_map: Dict[str, int] = field(default_factory=dict)
    image_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ProductPrice:
    """Price of a single store product.

    The backend label (e.g. "99.00 грн") is kept as-is in ``raw``.
    """

    product_id: str
    raw: str
    currency: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _as_list(value: Any) -> List[str]:
    """Convert None, a single value or a list into a list of strings."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value if v is not None]
    return [str(value)]


def _as_store_map(value: Any) -> Dict[str, int]:
    """Keep only entries whose id converts to int."""
    if not isinstance(value, dict):
        return {}
    out: Dict[str, int] = {}
    for store, pid in value.items():
        try:
            out[str(store)] = int(pid)
        except (TypeError, ValueError):
            continue
    return out


def map_product(dto: Dict[str, Any]) -> ProductItem:
    """Convert a backend product DTO into a ProductItem.

    Args:
        dto: Dict with ``name``, ``available_stores`` and ``product_store_mapping``

    Returns:
        ProductItem with missing collections defaulted to empty
    """
    return ProductItem(
        name=str(dto.get("name") or ""),
        available_stores=_as_list(dto.get("available_stores")),
        store_id_map=_as_store_map(dto.get("product_store_mapping")),
        image_url=dto.get("image_url") or None,
    )
