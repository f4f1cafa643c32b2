"""
Alignment of irregular series onto portfolio timestamps.

Benchmarks and per-symbol price bars are matched to each portfolio point by
nearest-prior-or-equal timestamp. When a point precedes every bar, the
earliest bar is used instead.
"""

import bisect
import logging
from collections import defaultdict
from datetime import datetime
from typing import Optional, Sequence

from perfboard.core.timezone import to_utc
from perfboard.domain.models import Bar, DownsampledPoint, HoldingPeriod, Order, Position
from perfboard.domain.views import BenchmarkComparison, ReturnPoint, ValuationPoint
from perfboard.services.reconstruction import filled_orders_chronological

logger = logging.getLogger(__name__)


class BarIndex:
    """Sorted bars with O(log n) nearest-prior lookup."""

    def __init__(self, bars: Sequence[Bar]):
        self._bars = sorted(bars, key=lambda b: to_utc(b.time))
        self._times = [to_utc(b.time) for b in self._bars]

    def __len__(self) -> int:
        return len(self._bars)

    def nearest_prior(self, moment: datetime) -> Optional[Bar]:
        """Latest bar at or before `moment`; the earliest bar if none precede it."""
        if not self._bars:
            return None
        idx = bisect.bisect_right(self._times, to_utc(moment))
        if idx == 0:
            return self._bars[0]
        return self._bars[idx - 1]


def nearest_prior_bar(bars: Sequence[Bar], moment: datetime) -> Optional[Bar]:
    return BarIndex(bars).nearest_prior(moment)


def _percent_change(value: float, base: float) -> float:
    if not base:
        return 0.0
    return (value - base) / base * 100


def compare_to_benchmark(
    symbol: str,
    portfolio: Sequence[DownsampledPoint],
    bars: Optional[Sequence[Bar]],
) -> BenchmarkComparison:
    """
    Portfolio and benchmark percent returns over the portfolio's timestamps.

    Both series are measured against their value at the first portfolio point
    and then shifted so the first point reads exactly 0 for both.
    """
    if not portfolio or not bars:
        return BenchmarkComparison(symbol=symbol, points=[])

    index = BarIndex(bars)
    base_value = portfolio[0].value
    base_price = index.nearest_prior(portfolio[0].time).close

    raw = []
    for point in portfolio:
        bar = index.nearest_prior(point.time)
        raw.append((point, _percent_change(point.value, base_value), _percent_change(bar.close, base_price)))

    first_portfolio, first_benchmark = raw[0][1], raw[0][2]
    points = [
        ReturnPoint(
            day_key=point.day_key,
            time=point.time,
            portfolio_return=portfolio_return - first_portfolio,
            benchmark_return=benchmark_return - first_benchmark,
        )
        for point, portfolio_return, benchmark_return in raw
    ]
    return BenchmarkComparison(symbol=symbol, points=points)


class QuantityTimeline:
    """Shares held per symbol over time, accumulated forward over filled orders."""

    def __init__(self, orders: Sequence[Order]):
        self._times: dict[str, list[datetime]] = defaultdict(list)
        self._quantities: dict[str, list[float]] = defaultdict(list)
        running: dict[str, float] = defaultdict(float)
        for order in filled_orders_chronological(list(orders)):
            delta = order.quantity if order.is_buy else -order.quantity
            running[order.symbol] += delta
            self._times[order.symbol].append(to_utc(order.effective_time))
            self._quantities[order.symbol].append(running[order.symbol])

    @property
    def symbols(self) -> list[str]:
        return sorted(self._times)

    def quantity_at(self, symbol: str, moment: datetime) -> float:
        """Quantity held right after every order at or before `moment` (0 before any)."""
        times = self._times.get(symbol)
        if not times:
            return 0.0
        idx = bisect.bisect_right(times, to_utc(moment))
        if idx == 0:
            return 0.0
        return self._quantities[symbol][idx - 1]

    def holdings_at(self, moment: datetime) -> dict[str, float]:
        held = {}
        for symbol in self._times:
            quantity = self.quantity_at(symbol, moment)
            if quantity != 0:
                held[symbol] = quantity
        return held


def holding_periods(orders: Sequence[Order], history_start: Optional[datetime]) -> dict[str, HoldingPeriod]:
    """
    First buy and last sell per symbol.

    Buys before `history_start` are ignored.
    """
    start = to_utc(history_start) if history_start is not None else None
    buys: dict[str, list[datetime]] = defaultdict(list)
    sells: dict[str, list[datetime]] = defaultdict(list)
    for order in filled_orders_chronological(list(orders)):
        when = to_utc(order.effective_time)
        if order.is_buy:
            if start is None or when >= start:
                buys[order.symbol].append(when)
        else:
            sells[order.symbol].append(when)

    periods = {}
    for symbol, buy_times in buys.items():
        sell_times = sells.get(symbol)
        periods[symbol] = HoldingPeriod(
            symbol=symbol,
            first_buy=min(buy_times),
            last_sell=max(sell_times) if sell_times else None,
        )
    return periods


class PositionValuer:
    """Values positions at portfolio timestamps using nearest-prior bar closes."""

    def __init__(self, orders: Sequence[Order], bars_by_symbol: dict[str, Sequence[Bar]]):
        self._orders = list(orders)
        self._timeline = QuantityTimeline(orders)
        self._indexes = {s: BarIndex(b) for s, b in bars_by_symbol.items() if b}

    def _price(self, symbol: str, moment: datetime) -> Optional[float]:
        index = self._indexes.get(symbol)
        if index is None:
            return None
        bar = index.nearest_prior(moment)
        return bar.close if bar is not None else None

    def open_positions(
        self,
        points: Sequence[DownsampledPoint],
        positions: Sequence[Position],
    ) -> list[ValuationPoint]:
        """
        Value currently held symbols across the portfolio series.

        Symbols without bars fall back to the position's current price. Only
        points holding at least one current symbol, at or after the earliest
        buy of any current symbol, are kept.
        """
        current = {p.symbol: p for p in positions}
        if not current:
            return []

        buy_times = [
            to_utc(o.effective_time)
            for o in filled_orders_chronological(self._orders)
            if o.is_buy and o.symbol in current
        ]
        if not buy_times:
            return []
        earliest = min(buy_times)

        result = []
        for point in points:
            if to_utc(point.time) < earliest:
                continue
            values = {}
            for symbol, quantity in self._timeline.holdings_at(point.time).items():
                if symbol not in current:
                    continue
                price = self._price(symbol, point.time)
                if price is None:
                    price = current[symbol].current_price
                if price:
                    values[symbol] = abs(quantity * price)
            if values:
                result.append(ValuationPoint(time=point.time, total=point.value, values=values))
        return result

    def historical_trades(
        self,
        points: Sequence[DownsampledPoint],
        history_start: Optional[datetime],
    ) -> list[ValuationPoint]:
        """Value every traded symbol with bars, within its holding period."""
        periods = holding_periods(self._orders, history_start)
        result = []
        for point in points:
            values = {}
            for symbol, quantity in self._timeline.holdings_at(point.time).items():
                period = periods.get(symbol)
                if period is None or not period.contains(to_utc(point.time)):
                    continue
                price = self._price(symbol, point.time)
                if price is not None:
                    values[symbol] = abs(quantity * price)
            result.append(ValuationPoint(time=point.time, total=point.value, values=values))
        return result
