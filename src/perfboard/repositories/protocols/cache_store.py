"""Cache store protocol."""

from datetime import timedelta
from typing import Any, Optional, Protocol

from perfboard.domain.models import CacheEntry


class CacheStore(Protocol):
    """
    Interface for the process-lifetime key -> (value, fetch time) map.

    Freshness is not enforced here; callers compare the returned age
    against the threshold of the key's class.
    """

    def get(self, key: str) -> Optional[tuple[Any, timedelta]]:
        """Return (value, age) for a key, or None if never written."""
        ...

    def put(self, key: str, value: Any) -> CacheEntry:
        """Replace the entry for a key, stamping it with the current time."""
        ...

    def entries(self) -> list[CacheEntry]:
        """Return all entries (for status reporting)."""
        ...
