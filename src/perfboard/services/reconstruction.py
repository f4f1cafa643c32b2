"""Order-driven equity curve reconstruction."""

from dataclasses import dataclass
from datetime import datetime, timedelta

from perfboard.core.timezone import floor_to_hour, to_utc
from perfboard.domain.models import EquityPoint, Order

STEP = timedelta(hours=1)


@dataclass
class _Holding:
    quantity: float = 0.0
    average_price: float = 0.0


def filled_orders_chronological(orders: list[Order]) -> list[Order]:
    """Filled orders with a fill price, sorted by fill time (submit time if unfilled)."""
    usable = [o for o in orders if o.is_filled and o.filled_price is not None]
    return sorted(usable, key=lambda o: (to_utc(o.effective_time), o.id))


class EquityReconstructor:
    """
    Rebuilds an hourly equity curve from filled orders and a starting cash balance.

    Positions are valued at their weighted-average entry price; no market data
    is consulted.
    """

    def __init__(self, starting_cash: float = 100000.0):
        self._starting_cash = starting_cash

    def reconstruct(self, orders: list[Order], now: datetime) -> list[EquityPoint]:
        """
        Replay `orders` in one-hour steps from the hour of the first fill up to `now`.

        Each step applies the orders whose effective time falls in
        (previous step, this step]; the first step applies everything up to it.
        Returns an empty list when there are no filled orders.
        """
        ordered = filled_orders_chronological(orders)
        if not ordered:
            return []

        now = to_utc(now)
        cash = self._starting_cash
        holdings: dict[str, _Holding] = {}
        points: list[EquityPoint] = []

        step_time = floor_to_hour(ordered[0].effective_time)
        cursor = 0

        while step_time <= now:
            while cursor < len(ordered):
                order = ordered[cursor]
                when = to_utc(order.effective_time)
                if when > step_time:
                    break
                cash = self._apply(order, cash, holdings)
                cursor += 1

            equity = cash + sum(h.quantity * h.average_price for h in holdings.values())
            points.append(EquityPoint(time=step_time, equity=round(equity, 2)))
            step_time = step_time + STEP

        return points

    @staticmethod
    def _apply(order: Order, cash: float, holdings: dict[str, _Holding]) -> float:
        price = order.filled_price or 0.0
        quantity = order.quantity

        if order.is_buy:
            holding = holdings.setdefault(order.symbol, _Holding())
            total = holding.quantity + quantity
            if total > 0:
                holding.average_price = (
                    holding.average_price * holding.quantity + price * quantity
                ) / total
            holding.quantity = total
            return cash - quantity * price

        holding = holdings.get(order.symbol)
        if holding is not None:
            holding.quantity -= quantity
            if holding.quantity <= 0:
                del holdings[order.symbol]
        return cash + quantity * price
