"""Command-line front end for the product search client.

This package contains:
- search: CLI entry point (one-shot, dry-run, price lookup and interactive modes)
- session: Debounced search session that discards stale results
"""

__all__ = [
    "search",
    "session",
]
