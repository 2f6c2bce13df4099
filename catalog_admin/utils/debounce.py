"""Coalesce bursts of search input into a single delayed call."""

from __future__ import annotations

import threading
from typing import Any, Callable, Optional


class SearchDebouncer:
    """Owns at most one pending timer for a single search field.

    Every :meth:`schedule` call replaces the pending timer, so only the value
    typed last before the field goes quiet for ``delay_ms`` reaches the
    callback. Call :meth:`cancel` when the owner goes away.
    """

    def __init__(self, default_delay_ms: int = 300) -> None:
        self.default_delay_ms = default_delay_ms
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._pending: Optional[tuple[int, Any, Callable[[Any], None]]] = None
        self._generation = 0

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._pending is not None

    def schedule(
        self,
        value: Any,
        delay_ms: Optional[int] = None,
        callback: Optional[Callable[[Any], None]] = None,
    ) -> None:
        if callback is None:
            raise TypeError("schedule() requires a callback")
        delay = self.default_delay_ms if delay_ms is None else delay_ms
        with self._lock:
            self._cancel_locked()
            self._generation += 1
            generation = self._generation
            self._pending = (generation, value, callback)
            timer = threading.Timer(delay / 1000.0, self._fire, args=(generation,))
            timer.daemon = True
            self._timer = timer
            timer.start()

    def cancel(self) -> None:
        with self._lock:
            self._cancel_locked()

    def flush(self) -> bool:
        """Run the pending callback now; returns ``False`` if nothing was pending."""

        with self._lock:
            if self._pending is None:
                return False
            generation = self._pending[0]
        return self._fire(generation)

    def _fire(self, generation: int) -> bool:
        with self._lock:
            # A superseded or cancelled timer may still wake up; ignore it.
            if self._pending is None or self._pending[0] != generation:
                return False
            _, value, callback = self._pending
            self._pending = None
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
        callback(value)
        return True

    def _cancel_locked(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        self._timer = None
        self._pending = None
