"""Network utilities for backend HTTP requests and session management.

Provides a lazily built HTTP session and a single-attempt GET helper that
parses the response by content type. Failures are logged and reported as
None so callers can degrade to empty results.
"""
from __future__ import annotations

import logging
from typing import Dict, Optional, Union

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import get_api_config

logger = logging.getLogger(__name__)

# Global session (lazy-initialized)
_SESSION: Optional[requests.Session] = None


def build_session() -> requests.Session:
    """Build a requests session with default headers and no automatic retries.

    Returns:
        Configured Session instance
    """
    session = requests.Session()

    retry = Retry(total=0, raise_on_status=False)
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("http://", adapter)
    session.mount("https://", adapter)

    session.headers.update({
        "User-Agent": "product-search/0.1",
        "Accept": "application/json",
        "Content-Type": "application/json",
    })

    return session


def get_session() -> requests.Session:
    """Get the global HTTP session (lazy initialization).

    Returns:
        Configured Session instance
    """
    global _SESSION
    if _SESSION is None:
        _SESSION = build_session()
    return _SESSION


def build_api_url(path: str) -> str:
    """Join the configured backend base URL with a request path."""
    base = str(get_api_config().get("base_url") or "")
    if base.endswith("/"):
        base = base[:-1]
    if path and not path.startswith("/"):
        path = "/" + path
    return f"{base}{path}"


def make_request(
    path: str,
    headers: Optional[Dict[str, str]] = None,
    timeout: Optional[float] = None,
) -> Optional[Union[Dict, list, str, bytes]]:
    """HTTP GET against the backend API.

    The path must already carry its query string (see
    ``product_search.query_helpers.build_query_string``).

    Args:
        path: Request path relative to the configured base URL
        headers: Additional headers
        timeout: Request timeout in seconds (defaults to config timeout_s)

    Returns:
        - dict or list for JSON responses
        - str for text/xml/html
        - bytes for other/binary content
        - None on error
    """
    session = get_session()
    api = get_api_config()
    url = build_api_url(path)

    effective_timeout = float(timeout if timeout is not None else api.get("timeout_s", 15))

    # Merge headers: session defaults < configured headers < per-call headers
    req_headers = {str(k): str(v) for k, v in api.get("headers", {}).items() if v is not None}
    if headers:
        req_headers.update(headers)

    try:
        resp = session.get(url, headers=req_headers or None, timeout=effective_timeout)
    except requests.exceptions.Timeout:
        logger.error("Request timed out: %s", url)
        return None
    except requests.exceptions.RequestException as e:
        logger.error("Request failed for %s: %s", url, e)
        return None

    if not resp.ok:
        logger.warning("HTTP %s for %s", resp.status_code, url)
        return None

    content_type = resp.headers.get("Content-Type", "").lower()
    if "json" in content_type:
        try:
            return resp.json()
        except ValueError as e:
            logger.error("JSON decode error for %s: %s", url, e)
            return None

    if any(t in content_type for t in ("text/", "xml", "html")):
        return resp.text

    return resp.content
