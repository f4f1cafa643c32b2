"""View models for service outputs."""

from perfboard.domain.views.series import (
    EquityHistory,
    BarSeries,
    ReturnPoint,
    BenchmarkComparison,
    ValuationPoint,
)
from perfboard.domain.views.activity import ReasoningEntry, TradeLogEntry, ActivityItem
from perfboard.domain.views.dashboard import (
    DashboardSnapshot,
    DashboardView,
    PerformanceSummary,
    ReturnWindow,
)

__all__ = [
    "EquityHistory",
    "BarSeries",
    "ReturnPoint",
    "BenchmarkComparison",
    "ValuationPoint",
    "ReasoningEntry",
    "TradeLogEntry",
    "ActivityItem",
    "DashboardSnapshot",
    "DashboardView",
    "PerformanceSummary",
    "ReturnWindow",
]
