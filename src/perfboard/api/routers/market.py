"""Market data endpoints."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from perfboard.api.deps import get_account_service, get_cache_gateway, get_market_data_service
from perfboard.api.schemas import (
    BarResponse,
    BarSeriesResponse,
    CacheEntryResponse,
    CacheStatusResponse,
)
from perfboard.core.exceptions import ValidationError
from perfboard.domain.views import BarSeries
from perfboard.services import AccountService, CacheGateway, MarketDataService

router = APIRouter(prefix="/market", tags=["market"])


def _check_range(start: Optional[date], end: Optional[date]) -> None:
    if start and end and start > end:
        raise ValidationError(f"start {start} is after end {end}")


def series_to_response(series: BarSeries) -> BarSeriesResponse:
    bars = None
    if series.bars:
        bars = [BarResponse(t=b.time, c=b.close) for b in series.bars]
    return BarSeriesResponse(symbol=series.symbol, bars=bars, source=series.source.value)


@router.get("/benchmarks/{symbol}/bars", response_model=BarSeriesResponse)
async def get_benchmark_bars(
    symbol: str,
    start: Optional[date] = Query(None, description="Range start (YYYY-MM-DD)"),
    end: Optional[date] = Query(None, description="Range end (YYYY-MM-DD)"),
    market: MarketDataService = Depends(get_market_data_service),
) -> BarSeriesResponse:
    """Get hourly bars for a benchmark, falling back to its static snapshot."""
    _check_range(start, end)
    series = await market.get_benchmark_bars(symbol, start=start, end=end)
    return series_to_response(series)


@router.get("/stocks/{symbol}/bars", response_model=BarSeriesResponse)
async def get_stock_bars(
    symbol: str,
    start: Optional[date] = Query(None, description="Range start (YYYY-MM-DD)"),
    end: Optional[date] = Query(None, description="Range end (YYYY-MM-DD)"),
    market: MarketDataService = Depends(get_market_data_service),
    accounts: AccountService = Depends(get_account_service),
) -> BarSeriesResponse:
    """Get hourly bars for any symbol; traded symbols without bars get a placeholder series."""
    _check_range(start, end)
    orders = await accounts.get_orders()
    series = await market.get_stock_bars(symbol, orders=orders, start=start, end=end)
    return series_to_response(series)


@router.get("/cache-status", response_model=CacheStatusResponse)
def get_cache_status(
    cache: CacheGateway = Depends(get_cache_gateway),
) -> CacheStatusResponse:
    """List cache entries with age and validity."""
    return CacheStatusResponse(entries=[CacheEntryResponse(**row) for row in cache.status()])
