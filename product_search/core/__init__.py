"""Core utilities for the product search client.

- config: Configuration loading and section accessors
- network: HTTP session and backend requests
- debounce: Debounced callables for interactive search
"""

__all__ = [
    "config",
    "network",
    "debounce",
]
