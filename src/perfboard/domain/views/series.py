"""View models for fetched and derived series."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from perfboard.domain.models import Bar, EquityPoint, SeriesSource


@dataclass
class EquityHistory:
    """Equity curve plus the strategy that produced it."""

    points: list[EquityPoint] = field(default_factory=list)
    source: SeriesSource = SeriesSource.EMPTY
    variant: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.points

    @classmethod
    def empty(cls) -> "EquityHistory":
        return cls(points=[], source=SeriesSource.EMPTY)


@dataclass
class BarSeries:
    """Price bars for one symbol; `bars` is None when nothing usable exists."""

    symbol: str
    bars: Optional[list[Bar]] = None
    source: SeriesSource = SeriesSource.EMPTY

    @property
    def has_bars(self) -> bool:
        return bool(self.bars)


@dataclass
class ReturnPoint:
    """Portfolio and benchmark percent returns at one portfolio timestamp."""

    day_key: date
    time: datetime
    portfolio_return: float
    benchmark_return: float


@dataclass
class BenchmarkComparison:
    """Portfolio vs. benchmark, both anchored at 0% on the first point."""

    symbol: str
    points: list[ReturnPoint] = field(default_factory=list)


@dataclass
class ValuationPoint:
    """Per-symbol position values at one portfolio timestamp."""

    time: datetime
    total: float
    values: dict[str, float] = field(default_factory=dict)
