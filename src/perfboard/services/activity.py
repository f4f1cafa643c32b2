"""Activity timeline: trade entries interleaved with reasoning notes."""

from collections import defaultdict
from datetime import timedelta

from perfboard.core.timezone import to_utc
from perfboard.domain.models import Order
from perfboard.domain.views import ActivityItem, ReasoningEntry, TradeLogEntry

DISCREPANCY_THRESHOLD = timedelta(days=1)


def _trade_entry(order: Order) -> TradeLogEntry:
    discrepancy = (
        order.filled_at is not None
        and abs(to_utc(order.filled_at) - to_utc(order.submitted_at)) > DISCREPANCY_THRESHOLD
    )
    return TradeLogEntry(
        order_id=order.id,
        title=f"{order.symbol} {order.side.value.upper()}",
        action=order.side.value.upper(),
        symbol=order.symbol,
        quantity=order.quantity,
        price=order.filled_price,
        total_value=order.notional,
        status=order.status.value,
        order_type=order.order_type,
        submitted_at=order.submitted_at,
        filled_at=order.filled_at,
        has_date_discrepancy=discrepancy,
    )


def build_trade_log(orders: list[Order], limit: int = 100) -> list[TradeLogEntry]:
    """
    Turn the first `limit` orders into trade entries.

    Position before/after is accumulated in submit-time order. Only filled
    orders move the position. Entries are returned oldest first.
    """
    entries = [_trade_entry(o) for o in orders[:limit]]
    entries.sort(key=lambda e: to_utc(e.submitted_at))

    held: dict[str, float] = defaultdict(float)
    for entry in entries:
        before = held[entry.symbol]
        after = before
        if entry.status == "filled":
            after = before + entry.quantity if entry.action == "BUY" else before - entry.quantity
        held[entry.symbol] = after
        entry.position_before = before
        entry.position_after = after
    return entries


def build_activity(
    orders: list[Order],
    reasoning: list[ReasoningEntry],
    limit: int = 100,
) -> list[ActivityItem]:
    """Trades and reasoning notes merged by timestamp, newest first."""
    items = [
        ActivityItem(kind="trade", timestamp=entry.submitted_at, trade=entry)
        for entry in build_trade_log(orders, limit)
    ]
    items.extend(ActivityItem(kind="reasoning", timestamp=r.timestamp, reasoning=r) for r in reasoning)
    items.sort(key=lambda item: to_utc(item.timestamp), reverse=True)
    return items
