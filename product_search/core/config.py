"""Configuration management for the product search client.

Handles loading and caching of the JSON configuration file with environment
variable support (PRODUCT_SEARCH_CONFIG_PATH) and section accessors.

The configuration system provides:
- Centralized config loading with caching
- Backend API settings (base URL, timeout, paths, headers)
- Sanitizer limits
- Search behaviour (debounce delay, default currency)
"""
from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

_CONFIG_CACHE: Optional[Dict[str, Any]] = None

DEFAULT_BASE_URL = "http://localhost:8080"
DEFAULT_PRODUCTS_PATH = "/api/v1/products"


def get_config(force_reload: bool = False) -> Dict[str, Any]:
    """Load project configuration JSON.

    Looks for the path in PRODUCT_SEARCH_CONFIG_PATH env var; falls back to
    'config.json' in CWD. Caches the result unless force_reload is True.

    Returns:
        Configuration dictionary (empty dict if file not found or invalid)
    """
    global _CONFIG_CACHE
    if _CONFIG_CACHE is not None and not force_reload:
        return _CONFIG_CACHE

    path = os.environ.get("PRODUCT_SEARCH_CONFIG_PATH", "config.json")
    try:
        if os.path.exists(path):
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f) or {}
            if not isinstance(data, dict):
                logger.error("Config at %s is not a JSON object; ignoring it", path)
                data = {}
            _CONFIG_CACHE = data
        else:
            _CONFIG_CACHE = {}
    except (OSError, ValueError) as e:
        logger.error("Failed to load config from %s: %s", path, e)
        _CONFIG_CACHE = {}

    return _CONFIG_CACHE


def get_api_config() -> Dict[str, Any]:
    """Get backend API configuration section.

    PRODUCT_SEARCH_API_BASE_URL overrides the configured base URL.

    Returns:
        API configuration dictionary with defaults
    """
    cfg = get_config()
    api = dict(cfg.get("api", {}) or {})

    env_base = os.environ.get("PRODUCT_SEARCH_API_BASE_URL")
    if env_base:
        api["base_url"] = env_base

    api.setdefault("base_url", DEFAULT_BASE_URL)
    api.setdefault("timeout_s", 15)
    api.setdefault("products_path", DEFAULT_PRODUCTS_PATH)

    if not isinstance(api.get("headers", {}), dict):
        api["headers"] = {}
    api.setdefault("headers", {})

    return api


def get_sanitizer_config() -> Dict[str, Any]:
    """Get sanitizer configuration section."""
    cfg = get_config()
    san = dict(cfg.get("sanitizer", {}) or {})
    san.setdefault("max_len", 200)
    return san


def get_max_query_length() -> int:
    """Maximum sanitized query length; invalid values fall back to 200."""
    val = get_sanitizer_config().get("max_len")
    if isinstance(val, int) and not isinstance(val, bool) and val > 0:
        return val
    return 200


def get_search_config() -> Dict[str, Any]:
    """Get search behaviour configuration section."""
    cfg = get_config()
    search = dict(cfg.get("search", {}) or {})
    search.setdefault("debounce_ms", 300)
    search.setdefault("default_currency", "UAH")
    return search


def get_debounce_seconds() -> float:
    """Debounce delay for interactive search, in seconds."""
    try:
        return max(0.0, float(get_search_config().get("debounce_ms", 300)) / 1000.0)
    except (TypeError, ValueError):
        return 0.3
