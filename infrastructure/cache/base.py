from datetime import timedelta
from typing import Any, Protocol


class CacheService(Protocol):
    """Key/value store with per-entry expiry.

    ``get`` reports a miss for absent or expired keys instead of raising;
    ``set`` overwrites unconditionally and restarts the TTL.
    """

    async def get(self, key: str) -> tuple[Any, bool]:
        ...

    async def set(self, key: str, value: Any, ttl: timedelta) -> None:
        ...
