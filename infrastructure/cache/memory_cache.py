import time
from collections.abc import Callable
from datetime import timedelta
from typing import Any


class MemoryCacheService:
    """In-process cache. Entries expire lazily when read; there is no size bound."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: dict[str, tuple[Any, float]] = {}

    async def get(self, key: str) -> tuple[Any, bool]:
        entry = self._entries.get(key)
        if entry is None:
            return None, False

        value, expires_at = entry
        if self._clock() >= expires_at:
            self._entries.pop(key, None)
            return None, False

        return value, True

    async def set(self, key: str, value: Any, ttl: timedelta) -> None:
        self._entries[key] = (value, self._clock() + ttl.total_seconds())

    def __len__(self) -> int:
        return len(self._entries)
