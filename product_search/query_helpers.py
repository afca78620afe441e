"""Query string building utilities for product search requests.

Serializes parameter mappings into percent-encoded URL query strings.
Values are encoded, never inspected: run free text through
``product_search.sanitize.sanitize_query`` before passing it here.
"""
from __future__ import annotations

import math
from typing import Mapping, Optional, Sequence, Union
from urllib.parse import quote

Scalar = Union[str, int, float, bool]
QueryValue = Union[Scalar, None, Sequence[Optional[Scalar]]]
QueryParams = Mapping[str, QueryValue]

# Integral floats at or above this switch to exponent form (1e+21)
_MAX_PLAIN_INTEGRAL = 1e21


def _stringify_float(value: float) -> str:
    """Render a float the way web clients format numbers.

    Integral values drop the ``.0`` (``1.0`` -> ``1``, ``-0.0`` -> ``0``),
    NaN becomes ``NaN`` and infinities ``Infinity``/``-Infinity``. Other
    values use ``repr``, whose exponent form differs for very small
    magnitudes (``1e-05`` where a browser would print ``0.00001``).
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < _MAX_PLAIN_INTEGRAL:
        return str(int(value))
    return repr(value)


def _stringify(value: Scalar) -> str:
    # bool is checked first since it is a subclass of int
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return _stringify_float(value)
    if isinstance(value, (str, int)):
        return str(value)
    raise TypeError(f"Unsupported query parameter value type: {type(value).__name__}")


def encode_query_param(value: Scalar) -> str:
    """Percent-encode a scalar for use as a URL query component.

    Only RFC 3986 unreserved characters (letters, digits, ``-._~``) are left
    as-is; everything else, including non-ASCII text, is escaped as UTF-8
    ``%XX`` sequences.

    Args:
        value: String, number or boolean

    Returns:
        Encoded string

    Raises:
        TypeError: If value is not a supported scalar
    """
    return quote(_stringify(value), safe="")


def _is_empty(value: object) -> bool:
    return value is None or value == ""


def build_query_string(params: QueryParams) -> str:
    """Build a ``?key=value&...`` query string from a parameter mapping.

    - Parameters are emitted in the mapping's iteration order.
    - None values and empty strings are omitted.
    - List/tuple values repeat the key once per non-empty element.

    Args:
        params: Mapping of parameter names to values

    Returns:
        Query string starting with ``?``, or an empty string when nothing is emitted

    Raises:
        TypeError: If a key is not a string or a value is of an unsupported type
    """
    parts: list[str] = []
    for key, val in params.items():
        if not isinstance(key, str):
            raise TypeError(f"Query parameter names must be strings, got {type(key).__name__}")
        if val is None:
            continue

        k = encode_query_param(key)
        if isinstance(val, (list, tuple)):
            for item in val:
                if _is_empty(item):
                    continue
                parts.append(f"{k}={encode_query_param(item)}")
        else:
            if val == "":
                continue
            parts.append(f"{k}={encode_query_param(val)}")

    return f"?{'&'.join(parts)}" if parts else ""


def build_search_url(
    base_url: str,
    q: str,
    page: Optional[int] = None,
    sort: Optional[str] = None,
) -> str:
    """Build a backend ``/search`` URL for a (sanitized) query.

    Args:
        base_url: Backend base URL; one trailing slash is ignored
        q: Search text, already sanitized
        page: Optional page number
        sort: Optional sort key

    Returns:
        Full search URL
    """
    qs = build_query_string({"q": q, "page": page, "sort": sort})
    if base_url.endswith("/"):
        base_url = base_url[:-1]
    return f"{base_url}/search{qs}"
