"""Pydantic schemas for account endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class AccountResponse(BaseModel):
    """Response schema for the account snapshot."""

    portfolio_value: float
    cash: float
    buying_power: float
    equity: float
    account_number: Optional[str] = None
    status: Optional[str] = None

    model_config = {"from_attributes": True}


class PositionResponse(BaseModel):
    """Response schema for an open position."""

    symbol: str
    quantity: float
    average_entry_price: float
    current_price: float
    market_value: float
    unrealized_pnl: float
    unrealized_pnl_percent: Optional[float] = None
    side: str = "long"

    model_config = {"from_attributes": True}


class OrderResponse(BaseModel):
    """Response schema for an order."""

    id: str
    symbol: str
    side: str
    quantity: float
    status: str
    order_type: str
    filled_price: Optional[float] = None
    submitted_at: datetime
    filled_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class EquityHistoryResponse(BaseModel):
    """
    Response schema for the equity curve.

    Parallel arrays; `timestamp` holds epoch seconds. Both are empty when
    every fetch strategy came up dry.
    """

    equity: list[float]
    timestamp: list[int]
    source: str
    variant: Optional[str] = None
