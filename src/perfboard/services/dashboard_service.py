"""Dashboard refresh cycle: gather raw inputs, derive display series."""

import asyncio
import logging
from datetime import datetime
from typing import Callable, Iterable, Optional

from perfboard.core.exceptions import ConfigurationError
from perfboard.core.timezone import now_utc
from perfboard.domain.models import Bar, SeriesSource
from perfboard.domain.views import DashboardSnapshot, DashboardView, ReasoningEntry
from perfboard.providers.reasoning_feed import ReasoningFeed
from perfboard.services.account_service import AccountService
from perfboard.services.activity import build_activity
from perfboard.services.aligner import PositionValuer, compare_to_benchmark
from perfboard.services.downsampler import (
    extend_to_now,
    filter_trustworthy,
    one_point_per_day,
    two_points_per_day,
)
from perfboard.services.history_service import EquityHistoryService
from perfboard.services.market_data_service import MarketDataService
from perfboard.services.summary import summarize

logger = logging.getLogger(__name__)


class DashboardService:
    """
    Runs one refresh cycle and keeps the latest result.

    Account, positions, orders and history are awaited in sequence; benchmark
    and per-symbol bar requests then fan out together in one gather.
    Overlapping refreshes are allowed and the last one to finish wins.
    """

    def __init__(
        self,
        account_service: AccountService,
        history_service: EquityHistoryService,
        market_data_service: MarketDataService,
        reasoning_feed: ReasoningFeed,
        benchmark_symbols: Iterable[str] = ("SPY", "QQQ"),
        equity_trust_floor: float = 1000.0,
        staleness_threshold_hours: int = 6,
        staleness_fill_cap_hours: int = 72,
        activity_limit: int = 100,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._account_service = account_service
        self._history_service = history_service
        self._market_data_service = market_data_service
        self._reasoning_feed = reasoning_feed
        self._benchmarks = [s.upper() for s in benchmark_symbols]
        self._trust_floor = equity_trust_floor
        self._staleness_hours = staleness_threshold_hours
        self._fill_cap_hours = staleness_fill_cap_hours
        self._activity_limit = activity_limit
        self._clock = clock
        self._latest_snapshot: Optional[DashboardSnapshot] = None
        self._latest_view: Optional[DashboardView] = None

    @property
    def latest_view(self) -> Optional[DashboardView]:
        return self._latest_view

    @property
    def latest_snapshot(self) -> Optional[DashboardSnapshot]:
        return self._latest_snapshot

    async def _reasoning(self) -> list[ReasoningEntry]:
        try:
            return await self._reasoning_feed.get_entries()
        except ConfigurationError:
            raise
        except Exception as exc:
            logger.warning("Reasoning feed unavailable: %s", exc)
            return []

    async def collect(self) -> DashboardSnapshot:
        """Gather the raw inputs of one refresh."""
        account = await self._account_service.get_account()
        positions = await self._account_service.get_positions()
        orders = await self._account_service.get_orders()
        history = await self._history_service.get_history()

        traded = {o.symbol for o in orders if o.is_filled} | {p.symbol for p in positions}
        benchmark_series, stock_bars = await asyncio.gather(
            asyncio.gather(*(self._market_data_service.get_benchmark_bars(s) for s in self._benchmarks)),
            self._market_data_service.get_many(traded, orders),
        )
        benchmarks = dict(zip(self._benchmarks, benchmark_series))
        reasoning = await self._reasoning()

        return DashboardSnapshot(
            fetched_at=self._clock(),
            account=account,
            positions=positions,
            orders=orders,
            history=history,
            benchmarks=benchmarks,
            stock_bars=stock_bars,
            reasoning=reasoning,
        )

    def _display_points(self, snapshot: DashboardSnapshot):
        trusted = filter_trustworthy(snapshot.history.points, self._trust_floor)
        current = snapshot.account.portfolio_value if snapshot.account else None
        return extend_to_now(
            trusted,
            current,
            snapshot.fetched_at,
            threshold_hours=self._staleness_hours,
            cap_hours=self._fill_cap_hours,
            floor=self._trust_floor,
        )

    def build_view(self, snapshot: DashboardSnapshot) -> DashboardView:
        """Derive every display series from a snapshot."""
        points = self._display_points(snapshot)
        daily = one_point_per_day(points)
        intraday = two_points_per_day(points)

        comparisons = {
            symbol: compare_to_benchmark(symbol, daily, series.bars)
            for symbol, series in snapshot.benchmarks.items()
        }

        bars_by_symbol: dict[str, list[Bar]] = {}
        for symbol, series in snapshot.benchmarks.items():
            if series.bars:
                bars_by_symbol[symbol] = series.bars
        for symbol, series in snapshot.stock_bars.items():
            if series.bars:
                bars_by_symbol[symbol] = series.bars

        valuer = PositionValuer(snapshot.orders, bars_by_symbol)
        history_start = intraday[0].time if intraday else None

        return DashboardView(
            generated_at=snapshot.fetched_at,
            history_source=snapshot.history.source.value,
            daily_series=daily,
            intraday_series=intraday,
            comparisons=comparisons,
            open_position_values=valuer.open_positions(intraday, snapshot.positions),
            historical_trade_values=valuer.historical_trades(intraday, history_start),
            activity=build_activity(snapshot.orders, snapshot.reasoning, self._activity_limit),
            summary=summarize(snapshot.account, snapshot.positions, snapshot.orders, intraday, snapshot.fetched_at),
            placeholder_symbols=sorted(
                s for s, series in snapshot.stock_bars.items() if series.source == SeriesSource.PLACEHOLDER
            ),
        )

    async def refresh(self) -> DashboardView:
        snapshot = await self.collect()
        view = self.build_view(snapshot)
        self._latest_snapshot = snapshot
        self._latest_view = view
        logger.info(
            "Dashboard refreshed: %d history points (%s), %d symbols",
            len(snapshot.history.points),
            snapshot.history.source.value,
            len(snapshot.stock_bars),
        )
        return view

    async def get_view(self) -> DashboardView:
        """Latest view, refreshing first if none exists yet."""
        if self._latest_view is None:
            return await self.refresh()
        return self._latest_view
