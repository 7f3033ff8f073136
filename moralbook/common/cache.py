"""
Small in-memory caches that can be injected wherever derived lookups are memoised.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from typing import Any, Callable, Hashable


class TTLCache:
    """
    Bounded least-recently-used cache whose entries expire after ``ttl_seconds``.

    Parameters
    ----------
    max_size:
        Maximum number of entries kept. The least recently used entry is evicted first.
    ttl_seconds:
        Lifetime of an entry, measured from the moment it was stored.
    clock:
        Monotonic time source. Mainly useful for testing.
    """

    def __init__(
        self,
        *,
        max_size: int = 128,
        ttl_seconds: float = 3600.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_size < 1:
            raise ValueError("max_size must be at least 1.")
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive.")
        self._max_size = max_size
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: OrderedDict[Hashable, tuple[float, Any]] = OrderedDict()

    def get(self, key: Hashable, default: Any = None) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            return default

        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return default

        self._entries.move_to_end(key)
        return value

    def set(self, key: Hashable, value: Any) -> None:
        self._entries[key] = (self._clock() + self._ttl, value)
        self._entries.move_to_end(key)
        while len(self._entries) > self._max_size:
            self._entries.popitem(last=False)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: Hashable) -> bool:
        sentinel = object()
        return self.get(key, sentinel) is not sentinel

    def __len__(self) -> int:
        return len(self._entries)


class NullCache:
    """Cache with the :class:`TTLCache` interface that never stores anything."""

    def get(self, key: Hashable, default: Any = None) -> Any:
        return default

    def set(self, key: Hashable, value: Any) -> None:
        return None

    def clear(self) -> None:
        return None

    def __contains__(self, key: Hashable) -> bool:
        return False

    def __len__(self) -> int:
        return 0
