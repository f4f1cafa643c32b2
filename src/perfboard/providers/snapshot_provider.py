"""Static fallback snapshots read from local JSON files."""

import json
import logging
from pathlib import Path
from typing import Any, Optional

from perfboard.core.timezone import parse_datetime_utc
from perfboard.domain.models import Bar, Order, OrderSide, OrderStatus

logger = logging.getLogger(__name__)

ORDER_OVERRIDES_FILE = "order_date_overrides.json"
SUPPLEMENTAL_ORDERS_FILE = "supplemental_orders.json"


def parse_snapshot_bars(payload: Any) -> list[Bar]:
    """Parse `{"bars": [{"t": iso, "c": close}, ...]}` into sorted Bars."""
    if not isinstance(payload, dict) or not isinstance(payload.get("bars"), list):
        return []
    by_time = {}
    for item in payload["bars"]:
        try:
            by_time[parse_datetime_utc(item["t"])] = float(item["c"])
        except (KeyError, TypeError, ValueError):
            continue
    return [Bar(time=t, close=c) for t, c in sorted(by_time.items())]


class StaticSnapshotProvider:
    """
    Reads pre-supplied snapshots from a directory.

    Benchmark files are named `<symbol>_fallback.json` (lowercase symbol).
    A missing or unreadable file behaves as "no snapshot".
    """

    def __init__(self, snapshot_dir: Path):
        self._dir = Path(snapshot_dir)

    def _load_json(self, filename: str) -> Optional[Any]:
        path = self._dir / filename
        if not path.exists():
            return None
        try:
            with path.open("r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as exc:
            logger.warning("Could not read snapshot %s: %s", path, exc)
            return None

    def load_benchmark_bars(self, symbol: str) -> list[Bar]:
        """Bars from the fallback snapshot for a benchmark symbol (empty if none)."""
        payload = self._load_json(f"{symbol.lower()}_fallback.json")
        return parse_snapshot_bars(payload) if payload is not None else []

    def load_order_date_overrides(self) -> dict[str, Any]:
        """Map of order id -> corrected submit time."""
        payload = self._load_json(ORDER_OVERRIDES_FILE)
        if not isinstance(payload, dict):
            return {}
        overrides = {}
        for order_id, mapping in (payload.get("date_mappings") or {}).items():
            try:
                overrides[order_id] = parse_datetime_utc(mapping["user_log_date"])
            except (KeyError, TypeError, ValueError):
                logger.warning("Ignoring malformed date override for order %s", order_id)
        return overrides

    def load_supplemental_orders(self) -> list[Order]:
        """Filled orders known locally but missing from the brokerage record."""
        payload = self._load_json(SUPPLEMENTAL_ORDERS_FILE)
        if not isinstance(payload, dict):
            return []
        orders = []
        for item in payload.get("orders") or []:
            try:
                when = parse_datetime_utc(item["timestamp"])
                orders.append(
                    Order(
                        id=str(item["id"]),
                        symbol=item["symbol"],
                        side=OrderSide(str(item["side"]).lower()),
                        quantity=float(item["qty"]),
                        filled_price=float(item["price"]),
                        submitted_at=when,
                        filled_at=when,
                        status=OrderStatus.FILLED,
                    )
                )
            except (KeyError, TypeError, ValueError):
                logger.warning("Ignoring malformed supplemental order: %r", item)
        return orders
