"""Time-series value types."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class Bar:
    """One market-data sample (closing price at `time`)."""

    time: datetime
    close: float


@dataclass(frozen=True)
class EquityPoint:
    """Raw or reconstructed portfolio value sample."""

    time: datetime
    equity: float


@dataclass(frozen=True)
class DownsampledPoint:
    """
    Display-grade sample.

    `synthetic` marks points created to fill a day with no raw sample.
    """

    day_key: date
    time: datetime
    value: float
    synthetic: bool = False


@dataclass(frozen=True)
class HoldingPeriod:
    """Window during which a symbol's valuation line is drawn."""

    symbol: str
    first_buy: datetime
    last_sell: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.last_sell is None

    def contains(self, moment: datetime) -> bool:
        if moment < self.first_buy:
            return False
        if self.last_sell is not None and moment > self.last_sell:
            return False
        return True
