"""Brokerage account and position models (read-only, brokerage-derived)."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AccountSnapshot:
    """Point-in-time account balances."""

    portfolio_value: float
    cash: float
    buying_power: float
    equity: float
    account_number: Optional[str] = None
    status: Optional[str] = None


@dataclass(frozen=True)
class Position:
    """
    Open position as reported by the brokerage.

    Quantity sign encodes long (positive) or short (negative).
    """

    symbol: str
    quantity: float
    average_entry_price: float
    current_price: float
    market_value: float
    unrealized_pnl: float
    unrealized_pnl_percent: Optional[float] = None
    cost_basis: Optional[float] = None
    side: str = "long"

    @property
    def pnl_percent(self) -> Optional[float]:
        """Percent move of current price over average entry."""
        if not self.average_entry_price:
            return None
        return (self.current_price - self.average_entry_price) / self.average_entry_price * 100
