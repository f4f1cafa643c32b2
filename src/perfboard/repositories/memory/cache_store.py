"""In-memory implementation of CacheStore."""

from datetime import datetime, timedelta
from typing import Any, Callable, Optional

from perfboard.core.timezone import now_utc
from perfboard.domain.models import CacheEntry


class InMemoryCacheStore:
    """
    Dict-backed cache store living for the lifetime of the process.

    One instance is built by the composition root; tests build a fresh one each.
    Writes replace whole entries, so overlapping writers resolve as last-write-wins.
    """

    def __init__(self, clock: Callable[[], datetime] = now_utc):
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def get(self, key: str) -> Optional[tuple[Any, timedelta]]:
        """Return (value, age) for a key, or None if never written."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        return entry.value, self._clock() - entry.fetched_at

    def put(self, key: str, value: Any) -> CacheEntry:
        """Replace the entry for a key, stamping it with the current time."""
        entry = CacheEntry(key=key, value=value, fetched_at=self._clock())
        self._entries[key] = entry
        return entry

    def entries(self) -> list[CacheEntry]:
        """Return all entries sorted by key."""
        return [self._entries[k] for k in sorted(self._entries)]

    def __len__(self) -> int:
        return len(self._entries)
