"""Response cache for idea generation.

Identical generation requests inside the TTL window are answered from
memory instead of calling the provider again. The service only talks to the
``ResponseCache`` interface, so a shared backend can replace the in-process
one without touching callers.
"""
from __future__ import annotations

import time
from collections import OrderedDict
from functools import lru_cache
from typing import Any, Callable, Optional, Protocol

from ideaboard.core.config import get_settings


class ResponseCache(Protocol):
    def get(self, key: str) -> Optional[Any]:
        ...

    def set(self, key: str, value: Any, ttl: int) -> None:
        ...


class TTLResponseCache:
    """Bounded in-process cache with per-entry expiry.

    Oldest entries are evicted first once ``max_entries`` is reached.
    """

    def __init__(self, max_entries: int = 256, clock: Callable[[], float] = time.monotonic) -> None:
        self._max_entries = max(1, max_entries)
        self._clock = clock
        self._entries: OrderedDict[str, tuple[float, Any]] = OrderedDict()

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: Any, ttl: int) -> None:
        if ttl <= 0:
            return
        self._entries.pop(key, None)
        while len(self._entries) >= self._max_entries:
            self._entries.popitem(last=False)
        self._entries[key] = (self._clock() + ttl, value)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


@lru_cache
def get_response_cache() -> TTLResponseCache:
    return TTLResponseCache(max_entries=get_settings().generation_cache_max_entries)


__all__ = ["ResponseCache", "TTLResponseCache", "get_response_cache"]
