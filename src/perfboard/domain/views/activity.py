"""View models for the activity timeline."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class ReasoningEntry:
    """Externally produced note; passed through untouched."""

    timestamp: datetime
    ticker: str
    text: str


@dataclass
class TradeLogEntry:
    """An order rendered as an activity row."""

    order_id: str
    title: str
    action: str
    symbol: str
    quantity: float
    price: Optional[float]
    total_value: Optional[float]
    status: str
    order_type: str
    submitted_at: datetime
    filled_at: Optional[datetime]
    has_date_discrepancy: bool
    position_before: float = 0.0
    position_after: float = 0.0


@dataclass
class ActivityItem:
    """One row of the merged timeline: either a trade or a reasoning note."""

    kind: str
    timestamp: datetime
    trade: Optional[TradeLogEntry] = None
    reasoning: Optional[ReasoningEntry] = None
