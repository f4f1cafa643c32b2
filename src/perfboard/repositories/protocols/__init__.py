"""Repository protocol definitions (interfaces)."""

from perfboard.repositories.protocols.cache_store import CacheStore

__all__ = [
    "CacheStore",
]
