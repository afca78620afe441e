"""Pytest configuration and shared fixtures for product search tests."""
from __future__ import annotations

import json
import os
import shutil
import tempfile
from typing import Any, Dict, Generator
from unittest.mock import MagicMock, patch

import pytest

import product_search.core.config as config_module
import product_search.core.network as network_module


# ============================================================================
# Path and Directory Fixtures
# ============================================================================

@pytest.fixture
def temp_dir() -> Generator[str, None, None]:
    """Create a temporary directory for test files."""
    dirpath = tempfile.mkdtemp(prefix="product_search_test_")
    yield dirpath
    shutil.rmtree(dirpath, ignore_errors=True)


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def sample_config() -> Dict[str, Any]:
    """Return a sample configuration dictionary."""
    return {
        "api": {
            "base_url": "https://shop.example.com/",
            "timeout_s": 5,
            "products_path": "/api/v1/products",
            "headers": {"X-Client": "tests"},
        },
        "sanitizer": {
            "max_len": 120,
        },
        "search": {
            "debounce_ms": 50,
            "default_currency": "UAH",
        },
    }


@pytest.fixture
def config_file(temp_dir: str, sample_config: Dict[str, Any]) -> str:
    """Create a temporary config file."""
    config_path = os.path.join(temp_dir, "config.json")
    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(sample_config, f)
    return config_path


@pytest.fixture
def mock_config(sample_config: Dict[str, Any]):
    """Mock the config module to return sample config."""
    with patch("product_search.core.config._CONFIG_CACHE", sample_config):
        with patch("product_search.core.config.get_config", return_value=sample_config):
            yield sample_config


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep tests independent of a local config.json, env overrides and the global session."""
    monkeypatch.setenv("PRODUCT_SEARCH_CONFIG_PATH", os.path.join(tempfile.gettempdir(), "missing-product-search.json"))
    monkeypatch.delenv("PRODUCT_SEARCH_API_BASE_URL", raising=False)
    monkeypatch.setattr(config_module, "_CONFIG_CACHE", None)
    monkeypatch.setattr(network_module, "_SESSION", None)
    yield


# ============================================================================
# HTTP Fixtures
# ============================================================================

def make_response(status: int = 200, json_data: Any = None, text: str = "", content_type: str = "application/json"):
    """Build a MagicMock shaped like a requests.Response."""
    resp = MagicMock()
    resp.status_code = status
    resp.ok = 200 <= status < 400
    resp.headers = {"Content-Type": content_type}
    resp.text = text
    resp.content = text.encode("utf-8")
    if isinstance(json_data, Exception):
        resp.json.side_effect = json_data
    else:
        resp.json.return_value = json_data
    return resp


@pytest.fixture
def response_factory():
    """Return the make_response helper."""
    return make_response


@pytest.fixture
def mock_session():
    """Patch the global session with a MagicMock."""
    session = MagicMock()
    with patch("product_search.core.network.get_session", return_value=session):
        yield session


@pytest.fixture
def sample_product_dtos() -> list:
    """Product DTOs as returned by the search endpoint."""
    return [
        {
            "name": "Сир кисломолочний 5%",
            "available_stores": ["silpo", "atb"],
            "product_store_mapping": {"silpo": 101, "atb": "202"},
        },
        {
            "name": "Молоко 2.5%",
            "available_stores": None,
            "product_store_mapping": None,
        },
    ]
