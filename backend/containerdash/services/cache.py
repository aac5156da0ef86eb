from __future__ import annotations

import threading
import time
from typing import Generic, TypeVar, Callable, Optional


T = TypeVar("T")


class TimedCache(Generic[T]):
    """Thread-safe single-value TTL cache for upstream lookups that rarely change."""

    def __init__(self, ttl_seconds: float = 60):
        self.ttl_seconds = ttl_seconds
        self._value: Optional[T] = None
        self._loaded_at: float | None = None
        self._lock = threading.Lock()

    def _is_fresh(self, now: float) -> bool:
        return self._loaded_at is not None and (now - self._loaded_at) <= self.ttl_seconds

    def get(self, builder: Callable[[], T], force_refresh: bool = False) -> T:
        # A failing builder leaves the previous value untouched and propagates.
        with self._lock:
            now = time.monotonic()
            if force_refresh or not self._is_fresh(now):
                self._value = builder()
                self._loaded_at = now
            return self._value

    def invalidate(self) -> None:
        with self._lock:
            self._value = None
            self._loaded_at = None
