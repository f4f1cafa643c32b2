"""Cache entry model."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class CacheEntry:
    """
    Cached value with its fetch time.

    IMPORTANT: Never update in place; a new fetch replaces the whole entry.
    """

    key: str
    value: Any
    fetched_at: datetime
