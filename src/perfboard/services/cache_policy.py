"""Cache key construction and per-class freshness rules."""

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Optional

from perfboard.domain.models import KeyClass
from perfboard.repositories import CacheStore

logger = logging.getLogger(__name__)

KEY_SEPARATOR = ":"


def cache_key(key_class: KeyClass, *parts: object) -> str:
    """Build a cache key whose first segment names its key class."""
    segments = [key_class.value] + [str(p) for p in parts if p is not None and p != ""]
    return KEY_SEPARATOR.join(segments)


def key_class_of(key: str) -> Optional[KeyClass]:
    """Recover the key class from a key built by `cache_key` (None if unknown)."""
    prefix = key.split(KEY_SEPARATOR, 1)[0]
    try:
        return KeyClass(prefix)
    except ValueError:
        return None


@dataclass(frozen=True)
class CachePolicy:
    """
    Freshness thresholds per key class.

    Account, positions, orders and equity history share the short threshold;
    price bars use the long one.
    """

    short_ttl: timedelta = timedelta(minutes=5)
    long_ttl: timedelta = timedelta(days=7)

    @classmethod
    def from_seconds(cls, short_seconds: int, long_seconds: int) -> "CachePolicy":
        return cls(short_ttl=timedelta(seconds=short_seconds), long_ttl=timedelta(seconds=long_seconds))

    def threshold(self, key_class: KeyClass) -> timedelta:
        if key_class == KeyClass.PRICE_BARS:
            return self.long_ttl
        return self.short_ttl

    def is_fresh(self, key_class: KeyClass, age: timedelta) -> bool:
        """An entry is usable while its age is strictly under the class threshold."""
        return age < self.threshold(key_class)

    def is_key_fresh(self, key: str, age: timedelta) -> bool:
        key_class = key_class_of(key)
        if key_class is None:
            return False
        return self.is_fresh(key_class, age)


class CacheGateway:
    """
    Cache Store access that applies the freshness policy.

    A fresh hit short-circuits the caller's fetch. A miss or stale hit returns
    None; callers fetch and `store` the result, replacing the entry wholesale.
    """

    def __init__(self, store: CacheStore, policy: Optional[CachePolicy] = None):
        self._store = store
        self._policy = policy or CachePolicy()

    @property
    def policy(self) -> CachePolicy:
        return self._policy

    def lookup(self, key: str) -> Optional[Any]:
        hit = self._store.get(key)
        if hit is None:
            logger.debug("Cache miss for %s", key)
            return None
        value, age = hit
        if not self._policy.is_key_fresh(key, age):
            logger.info("Cache entry %s is stale (age %s)", key, age)
            return None
        logger.debug("Cache hit for %s (age %s)", key, age)
        return value

    def store(self, key: str, value: Any) -> None:
        self._store.put(key, value)

    def status(self) -> list[dict[str, Any]]:
        """Every entry with its key class, age and validity."""
        rows = []
        for entry in self._store.entries():
            key = entry.key
            _, age = self._store.get(key)
            key_class = key_class_of(key)
            rows.append(
                {
                    "key": key,
                    "key_class": key_class.value if key_class else None,
                    "age_seconds": age.total_seconds(),
                    "is_valid": self._policy.is_key_fresh(key, age),
                }
            )
        return rows
