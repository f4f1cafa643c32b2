"""Headline performance numbers."""

from collections import defaultdict
from datetime import datetime, timedelta
from typing import Optional, Sequence

from perfboard.core.timezone import to_utc
from perfboard.domain.models import AccountSnapshot, DownsampledPoint, Order, Position
from perfboard.domain.views import PerformanceSummary, ReturnWindow

DEFAULT_START_VALUE = 100000.0


def _window(current: float, start_value: float) -> ReturnWindow:
    change = current - start_value
    percent = change / start_value * 100 if start_value > 0 else 0.0
    return ReturnWindow(start_value=start_value, change=change, change_percent=percent)


def _first_value_since(points: Sequence[DownsampledPoint], since: datetime) -> Optional[float]:
    for point in points:
        if to_utc(point.time) >= since:
            return point.value
    return None


def _average_prices(orders: Sequence[Order]) -> dict[str, tuple[list[float], list[float]]]:
    prices: dict[str, tuple[list[float], list[float]]] = defaultdict(lambda: ([], []))
    for order in orders:
        if not order.is_filled or order.filled_price is None:
            continue
        buys, sells = prices[order.symbol]
        (buys if order.is_buy else sells).append(order.filled_price)
    return prices


def summarize(
    account: Optional[AccountSnapshot],
    positions: Sequence[Position],
    orders: Sequence[Order],
    series: Sequence[DownsampledPoint],
    now: datetime,
) -> PerformanceSummary:
    """
    Build the performance summary.

    Window returns compare the current value with the first series point at
    or after each horizon; a horizon with no such point uses the first
    series point.
    """
    now = to_utc(now)
    current = account.portfolio_value if account else 0.0
    first_value = series[0].value if series else DEFAULT_START_VALUE

    two_day_start = _first_value_since(series, now - timedelta(hours=48))
    week_start = _first_value_since(series, now - timedelta(days=7))
    month_start = _first_value_since(series, now - timedelta(days=30))

    closed = 0
    profitable = 0
    pnl_percent: dict[str, float] = {p.symbol: p.pnl_percent for p in positions if p.pnl_percent is not None}
    for symbol, (buys, sells) in _average_prices(orders).items():
        if not buys or not sells:
            continue
        closed += 1
        avg_buy = sum(buys) / len(buys)
        avg_sell = sum(sells) / len(sells)
        if avg_sell > avg_buy:
            profitable += 1
        if avg_buy > 0 and symbol not in pnl_percent:
            pnl_percent[symbol] = (avg_sell - avg_buy) / avg_buy * 100

    exposure = 0.0
    if account and account.portfolio_value:
        exposure = (account.portfolio_value - account.cash) / account.portfolio_value * 100

    return PerformanceSummary(
        current_value=current,
        two_day=_window(current, two_day_start if two_day_start is not None else first_value),
        week=_window(current, week_start if week_start is not None else first_value),
        month=_window(current, month_start if month_start is not None else first_value),
        win_rate=profitable / closed * 100 if closed else 0.0,
        closed_trades=closed,
        profitable_trades=profitable,
        market_exposure=exposure,
        total_unrealized_pnl=sum(p.unrealized_pnl for p in positions),
        symbol_pnl_percent=pnl_percent,
    )
