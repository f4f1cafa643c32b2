"""Pydantic schemas for market data endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class BarResponse(BaseModel):
    """A single close sample."""

    t: datetime
    c: float


class BarSeriesResponse(BaseModel):
    """Response schema for a symbol's bars; `bars` is null when nothing is available."""

    symbol: str
    bars: Optional[list[BarResponse]] = None
    source: str


class CacheEntryResponse(BaseModel):
    """Response schema for one cache entry's status."""

    key: str
    key_class: Optional[str] = None
    age_seconds: float
    is_valid: bool


class CacheStatusResponse(BaseModel):
    """Response schema for cache status listing."""

    entries: list[CacheEntryResponse]
