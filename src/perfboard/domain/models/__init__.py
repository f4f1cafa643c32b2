"""Domain models package."""

from perfboard.domain.models.enums import OrderSide, OrderStatus, KeyClass, SeriesSource
from perfboard.domain.models.order import Order
from perfboard.domain.models.account import AccountSnapshot, Position
from perfboard.domain.models.series import Bar, EquityPoint, DownsampledPoint, HoldingPeriod
from perfboard.domain.models.cache import CacheEntry

__all__ = [
    "OrderSide",
    "OrderStatus",
    "KeyClass",
    "SeriesSource",
    "Order",
    "AccountSnapshot",
    "Position",
    "Bar",
    "EquityPoint",
    "DownsampledPoint",
    "HoldingPeriod",
    "CacheEntry",
]
