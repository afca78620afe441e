"""Debounced callables backed by threading timers."""
from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)


class Debounced:
    """Delay calls to ``fn`` until ``wait_s`` seconds pass without a new call.

    Each call replaces the pending one; only the latest arguments are used.
    """

    def __init__(self, fn: Callable[..., Any], wait_s: float = 0.3):
        self.fn = fn
        self.wait_s = max(0.0, float(wait_s or 0.0))
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._pending: Optional[Tuple[Tuple[Any, ...], Dict[str, Any]]] = None
        self._generation = 0

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            self._pending = (args, kwargs)
            timer = threading.Timer(self.wait_s, self._fire, args=(self._generation,))
            timer.daemon = True
            self._timer = timer
            timer.start()

    def _fire(self, generation: Optional[int] = None) -> None:
        with self._lock:
            # A timer that was superseded after it started running
            if generation is not None and generation != self._generation:
                return
            pending = self._pending
            self._pending = None
            self._timer = None
        if pending is None:
            return
        args, kwargs = pending
        try:
            self.fn(*args, **kwargs)
        except Exception:
            logger.exception("Debounced call to %r failed", self.fn)

    @property
    def pending(self) -> bool:
        """True while a call is scheduled but has not run yet."""
        with self._lock:
            return self._pending is not None

    def cancel(self) -> None:
        """Drop the pending call, if any."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            self._pending = None
            self._generation += 1

    def flush(self) -> None:
        """Run the pending call now instead of waiting for the timer."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            self._generation += 1
        self._fire()


def debounce(fn: Callable[..., Any], wait_s: float = 0.3) -> Debounced:
    """Wrap ``fn`` so bursts of calls collapse into one trailing call."""
    return Debounced(fn, wait_s)
