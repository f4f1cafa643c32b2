"""Domain layer - pure models with no external dependencies."""

from perfboard.domain.models import (
    Order,
    OrderSide,
    OrderStatus,
    AccountSnapshot,
    Position,
    Bar,
    EquityPoint,
    DownsampledPoint,
    HoldingPeriod,
    CacheEntry,
    KeyClass,
    SeriesSource,
)

__all__ = [
    "Order",
    "OrderSide",
    "OrderStatus",
    "AccountSnapshot",
    "Position",
    "Bar",
    "EquityPoint",
    "DownsampledPoint",
    "HoldingPeriod",
    "CacheEntry",
    "KeyClass",
    "SeriesSource",
]
