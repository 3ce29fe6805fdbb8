# app/client/cache.py
from typing import Any, Awaitable, Callable, Dict, Hashable, Tuple

Key = Tuple[Hashable, ...]


class QueryCache:
    """Last response per query key. A newer fetch always overwrites the entry."""

    def __init__(self):
        self._entries: Dict[Key, Any] = {}

    def get(self, key: Key, default: Any = None) -> Any:
        return self._entries.get(tuple(key), default)

    def set(self, key: Key, value: Any):
        self._entries[tuple(key)] = value

    def __contains__(self, key: Key) -> bool:
        return tuple(key) in self._entries

    async def fetch(self, key: Key, loader: Callable[[], Awaitable[Any]], refresh: bool = False) -> Any:
        key = tuple(key)
        if not refresh and key in self._entries:
            return self._entries[key]
        value = await loader()
        self._entries[key] = value
        return value

    def invalidate(self, *prefix: Hashable) -> int:
        """Drop every entry whose key starts with prefix; everything when empty."""
        stale = [k for k in self._entries if k[: len(prefix)] == prefix]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def clear(self):
        self._entries.clear()
