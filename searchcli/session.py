"""Debounced search session for interactive use.

Each keystroke-level edit goes through ``submit``; only the last edit in a
burst triggers a search. Every search is tagged with a generation number
and its results are published only if no later ``submit`` or ``clear``
superseded it, so a slow response can never overwrite a newer one.
"""
from __future__ import annotations

import logging
import threading
from typing import Callable, List, Optional

from product_search.core.config import get_debounce_seconds
from product_search.core.debounce import debounce
from product_search.model import ProductItem
from product_search.products_api import search_products

logger = logging.getLogger(__name__)

ResultsCallback = Callable[[str, List[ProductItem]], None]


class SearchSession:
    """Debounce search input and publish only the latest results."""

    def __init__(
        self,
        on_results: ResultsCallback,
        wait_s: Optional[float] = None,
        search: Callable[[str], List[ProductItem]] = search_products,
    ):
        self.on_results = on_results
        self._search = search
        self._lock = threading.Lock()
        self._generation = 0
        self._debounced = debounce(
            self._run,
            get_debounce_seconds() if wait_s is None else wait_s,
        )

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def _next_generation(self) -> int:
        with self._lock:
            self._generation += 1
            return self._generation

    def submit(self, text: str) -> None:
        """Schedule a search for ``text`` after the debounce delay."""
        self._debounced(text, self._next_generation())

    def clear(self) -> None:
        """Drop pending and in-flight searches and publish an empty result now."""
        self._debounced.cancel()
        self._next_generation()
        self.on_results("", [])

    def flush(self) -> None:
        """Run a pending search immediately on the calling thread."""
        self._debounced.flush()

    def close(self) -> None:
        self._debounced.cancel()
        self._next_generation()

    def _run(self, text: str, generation: int) -> bool:
        results = self._search(text)
        if generation != self.generation:
            logger.debug("Discarding stale results for %r (generation %d)", text, generation)
            return False
        self.on_results(text, results)
        return True
