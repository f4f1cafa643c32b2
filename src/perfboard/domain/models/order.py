"""Order domain model."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from perfboard.domain.models.enums import OrderSide, OrderStatus


@dataclass(frozen=True)
class Order:
    """
    Brokerage order (ground truth for reconstruction).

    Immutable once filled; a refresh replaces the whole order list.
    """

    id: str
    symbol: str
    side: OrderSide
    quantity: float
    submitted_at: datetime
    status: OrderStatus = OrderStatus.FILLED
    filled_price: Optional[float] = None
    filled_at: Optional[datetime] = None
    order_type: str = "market"

    def __post_init__(self) -> None:
        if isinstance(self.side, str) and not isinstance(self.side, OrderSide):
            object.__setattr__(self, "side", OrderSide(self.side.lower()))
        if isinstance(self.status, str) and not isinstance(self.status, OrderStatus):
            object.__setattr__(self, "status", OrderStatus.parse(self.status))

    @property
    def is_filled(self) -> bool:
        return self.status == OrderStatus.FILLED

    @property
    def is_buy(self) -> bool:
        return self.side == OrderSide.BUY

    @property
    def effective_time(self) -> datetime:
        """Fill time when known, otherwise submit time."""
        return self.filled_at or self.submitted_at

    @property
    def notional(self) -> Optional[float]:
        if self.filled_price is None:
            return None
        return self.filled_price * self.quantity
