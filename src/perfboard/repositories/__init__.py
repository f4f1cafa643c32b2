"""Repository layer - data access abstractions and implementations."""

from perfboard.repositories.protocols import CacheStore
from perfboard.repositories.memory import InMemoryCacheStore

__all__ = [
    "CacheStore",
    "InMemoryCacheStore",
]
