"""Market data service for benchmark and per-symbol price bars."""

import asyncio
import logging
from datetime import date, datetime
from typing import Callable, Iterable, Optional

from perfboard.core.timezone import now_utc
from perfboard.domain.models import Bar, KeyClass, Order, SeriesSource
from perfboard.domain.views import BarSeries
from perfboard.providers.market_data_provider import MarketDataProvider
from perfboard.providers.snapshot_provider import StaticSnapshotProvider
from perfboard.services.cache_policy import CacheGateway, cache_key
from perfboard.services.fallback_chain import FallbackStep, FetchResult, non_empty, run_chain
from perfboard.services.placeholder_series import PlaceholderSeriesGenerator

logger = logging.getLogger(__name__)


def bars_key(symbol: str, start: Optional[date] = None, end: Optional[date] = None) -> str:
    return cache_key(
        KeyClass.PRICE_BARS,
        symbol.upper(),
        start.isoformat() if start else "",
        end.isoformat() if end else "",
    )


class MarketDataService:
    """
    Service for fetching price bars.

    One provider query per symbol. Benchmarks fall back to a static snapshot,
    traded symbols fall back to a placeholder series, anything else comes back
    with `bars=None`. Only provider results are cached.
    """

    def __init__(
        self,
        provider: MarketDataProvider,
        snapshots: StaticSnapshotProvider,
        placeholder: PlaceholderSeriesGenerator,
        cache: CacheGateway,
        benchmark_symbols: Iterable[str] = ("SPY", "QQQ"),
        clock: Callable[[], datetime] = now_utc,
    ):
        self._provider = provider
        self._snapshots = snapshots
        self._placeholder = placeholder
        self._cache = cache
        self._benchmarks = {s.upper() for s in benchmark_symbols}
        self._clock = clock

    def is_benchmark(self, symbol: str) -> bool:
        return symbol.upper() in self._benchmarks

    def _provider_step(self, symbol: str, key: str) -> FallbackStep[BarSeries]:
        async def run() -> FetchResult[BarSeries]:
            bars = await self._provider.get_intraday_bars(symbol)
            if not bars:
                return FetchResult.failure("no usable bars")
            series = BarSeries(symbol=symbol, bars=bars, source=SeriesSource.PROVIDER)
            self._cache.store(key, series)
            return FetchResult.success(series)

        return FallbackStep(name="provider", run=run)

    def _snapshot_step(self, symbol: str) -> FallbackStep[BarSeries]:
        async def run() -> FetchResult[BarSeries]:
            bars = self._snapshots.load_benchmark_bars(symbol)
            result = non_empty(bars, "no static snapshot")
            if not result.ok:
                return result
            return FetchResult.success(BarSeries(symbol=symbol, bars=bars, source=SeriesSource.STATIC_SNAPSHOT))

        return FallbackStep(name="static-snapshot", run=run)

    def _placeholder_step(self, symbol: str, orders: list[Order]) -> FallbackStep[BarSeries]:
        async def run() -> FetchResult[BarSeries]:
            bars: list[Bar] = self._placeholder.generate(symbol, orders, self._clock())
            if not bars:
                return FetchResult.failure("symbol never bought")
            return FetchResult.success(BarSeries(symbol=symbol, bars=bars, source=SeriesSource.PLACEHOLDER))

        return FallbackStep(name="placeholder", run=run)

    async def get_benchmark_bars(
        self,
        symbol: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> BarSeries:
        symbol = symbol.upper()
        key = bars_key(symbol, start, end)
        cached = self._cache.lookup(key)
        if cached is not None:
            return cached

        steps = [self._provider_step(symbol, key)]
        if self.is_benchmark(symbol):
            steps.append(self._snapshot_step(symbol))
        outcome = await run_chain(steps, label=f"{symbol} bars")
        return outcome.value if outcome.succeeded else BarSeries(symbol=symbol)

    async def get_stock_bars(
        self,
        symbol: str,
        orders: Optional[list[Order]] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> BarSeries:
        """Bars for an arbitrary symbol; a symbol with filled orders but no bars gets a placeholder series."""
        symbol = symbol.upper()
        key = bars_key(symbol, start, end)
        cached = self._cache.lookup(key)
        if cached is not None:
            return cached

        steps = [self._provider_step(symbol, key)]
        traded = [o for o in orders or [] if o.symbol.upper() == symbol and o.is_filled]
        if traded:
            steps.append(self._placeholder_step(symbol, traded))
        outcome = await run_chain(steps, label=f"{symbol} bars")
        return outcome.value if outcome.succeeded else BarSeries(symbol=symbol)

    async def get_many(self, symbols: Iterable[str], orders: list[Order]) -> dict[str, BarSeries]:
        """Concurrent fan-out, one independent request per symbol."""
        unique = sorted({s.upper() for s in symbols})
        results = await asyncio.gather(*(self.get_stock_bars(s, orders) for s in unique))
        return dict(zip(unique, results))
