"""Pydantic schemas for API responses."""

from perfboard.api.schemas.account import (
    AccountResponse,
    PositionResponse,
    OrderResponse,
    EquityHistoryResponse,
)
from perfboard.api.schemas.market import (
    BarResponse,
    BarSeriesResponse,
    CacheEntryResponse,
    CacheStatusResponse,
)
from perfboard.api.schemas.dashboard import DashboardResponse

__all__ = [
    "AccountResponse",
    "PositionResponse",
    "OrderResponse",
    "EquityHistoryResponse",
    "BarResponse",
    "BarSeriesResponse",
    "CacheEntryResponse",
    "CacheStatusResponse",
    "DashboardResponse",
]
