"""In-memory repository implementations."""

from perfboard.repositories.memory.cache_store import InMemoryCacheStore

__all__ = [
    "InMemoryCacheStore",
]
