"""
Query Cache Module

Keeps the last result of each list query under a key such as "admin-events"
or "media:Worship" so repeated page reads do not refetch. Mutations
invalidate by key prefix, and the next read goes back to the backend.
"""

from typing import Callable, Dict, List, Any, Optional

from utils.logger import get_logger

logger = get_logger(__name__)


class QueryCache:
    """Keyed cache of list query results."""

    def __init__(self):
        self._entries: Dict[str, List[Any]] = {}

    def get(self, key: str) -> Optional[List[Any]]:
        return self._entries.get(key)

    def set(self, key: str, rows: List[Any]) -> None:
        self._entries[key] = rows

    def get_or_fetch(self, key: str, fetch: Callable[[], List[Any]]) -> List[Any]:
        """
        Return the cached rows for `key`, calling `fetch` on a miss.

        A failing fetch stores nothing, so the next call tries again.
        """
        if key in self._entries:
            return self._entries[key]
        rows = fetch()
        self._entries[key] = rows
        return rows

    def invalidate(self, key: str) -> int:
        """
        Drop `key` and every key nested under it ("media" also drops "media:Worship").

        Returns:
            int: Number of entries dropped; 0 when nothing was cached.
        """
        stale = [k for k in self._entries if k == key or k.startswith(f"{key}:")]
        for k in stale:
            del self._entries[k]
        if stale:
            logger.debug(f"Invalidated {len(stale)} cached queries for {key}")
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: str) -> bool:
        return key in self._entries
