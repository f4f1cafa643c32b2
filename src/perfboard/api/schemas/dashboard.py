"""Pydantic schemas for the dashboard view."""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel


class SeriesPointResponse(BaseModel):
    """One downsampled point."""

    day_key: date
    time: datetime
    value: float
    synthetic: bool = False

    model_config = {"from_attributes": True}


class ReturnPointResponse(BaseModel):
    """Portfolio vs. benchmark percent return at one point."""

    day_key: date
    time: datetime
    portfolio_return: float
    benchmark_return: float

    model_config = {"from_attributes": True}


class ComparisonResponse(BaseModel):
    symbol: str
    points: list[ReturnPointResponse]

    model_config = {"from_attributes": True}


class ValuationPointResponse(BaseModel):
    """Per-symbol position values at one point."""

    time: datetime
    total: float
    values: dict[str, float]

    model_config = {"from_attributes": True}


class TradeLogResponse(BaseModel):
    order_id: str
    title: str
    action: str
    symbol: str
    quantity: float
    price: Optional[float] = None
    total_value: Optional[float] = None
    status: str
    order_type: str
    submitted_at: datetime
    filled_at: Optional[datetime] = None
    has_date_discrepancy: bool
    position_before: float
    position_after: float

    model_config = {"from_attributes": True}


class ReasoningResponse(BaseModel):
    timestamp: datetime
    ticker: str
    text: str

    model_config = {"from_attributes": True}


class ActivityItemResponse(BaseModel):
    """A trade or a reasoning note in the merged timeline."""

    kind: str
    timestamp: datetime
    trade: Optional[TradeLogResponse] = None
    reasoning: Optional[ReasoningResponse] = None

    model_config = {"from_attributes": True}


class ReturnWindowResponse(BaseModel):
    start_value: float
    change: float
    change_percent: float

    model_config = {"from_attributes": True}


class SummaryResponse(BaseModel):
    """Headline performance numbers."""

    current_value: float
    two_day: ReturnWindowResponse
    week: ReturnWindowResponse
    month: ReturnWindowResponse
    win_rate: float
    closed_trades: int
    profitable_trades: int
    market_exposure: float
    total_unrealized_pnl: float
    symbol_pnl_percent: dict[str, float]

    model_config = {"from_attributes": True}


class DashboardResponse(BaseModel):
    """Response schema for the derived dashboard view."""

    generated_at: datetime
    history_source: str
    daily_series: list[SeriesPointResponse]
    intraday_series: list[SeriesPointResponse]
    comparisons: dict[str, ComparisonResponse]
    open_position_values: list[ValuationPointResponse]
    historical_trade_values: list[ValuationPointResponse]
    activity: list[ActivityItemResponse]
    summary: Optional[SummaryResponse] = None
    placeholder_symbols: list[str]

    model_config = {"from_attributes": True}
