"""View models for a full dashboard refresh."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from perfboard.domain.models import AccountSnapshot, DownsampledPoint, Order, Position
from perfboard.domain.views.activity import ActivityItem, ReasoningEntry
from perfboard.domain.views.series import (
    BarSeries,
    BenchmarkComparison,
    EquityHistory,
    ValuationPoint,
)


@dataclass
class DashboardSnapshot:
    """Raw inputs gathered by one refresh cycle."""

    fetched_at: datetime
    account: Optional[AccountSnapshot]
    positions: list[Position] = field(default_factory=list)
    orders: list[Order] = field(default_factory=list)
    history: EquityHistory = field(default_factory=EquityHistory.empty)
    benchmarks: dict[str, BarSeries] = field(default_factory=dict)
    stock_bars: dict[str, BarSeries] = field(default_factory=dict)
    reasoning: list[ReasoningEntry] = field(default_factory=list)


@dataclass
class ReturnWindow:
    """Change in portfolio value over a trailing window."""

    start_value: float
    change: float
    change_percent: float


@dataclass
class PerformanceSummary:
    """Headline numbers shown above the charts."""

    current_value: float
    two_day: ReturnWindow
    week: ReturnWindow
    month: ReturnWindow
    win_rate: float
    closed_trades: int
    profitable_trades: int
    market_exposure: float
    total_unrealized_pnl: float
    symbol_pnl_percent: dict[str, float] = field(default_factory=dict)


@dataclass
class DashboardView:
    """Display-grade series derived from a DashboardSnapshot."""

    generated_at: datetime
    history_source: str
    daily_series: list[DownsampledPoint] = field(default_factory=list)
    intraday_series: list[DownsampledPoint] = field(default_factory=list)
    comparisons: dict[str, BenchmarkComparison] = field(default_factory=dict)
    open_position_values: list[ValuationPoint] = field(default_factory=list)
    historical_trade_values: list[ValuationPoint] = field(default_factory=list)
    activity: list[ActivityItem] = field(default_factory=list)
    summary: Optional[PerformanceSummary] = None
    placeholder_symbols: list[str] = field(default_factory=list)
