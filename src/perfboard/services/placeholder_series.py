"""
Placeholder price series for traded symbols without real bars.

The output is cosmetic. It keeps per-symbol charts populated and is not a
forecast or a reconstruction of real prices. Every series produced here is
tagged SeriesSource.PLACEHOLDER and never cached.
"""

import logging
import math
import random
from datetime import datetime, timedelta
from typing import Optional

from perfboard.core.timezone import to_utc
from perfboard.domain.models import Bar, Order

logger = logging.getLogger(__name__)

DEFAULT_GAIN = 0.05
OSCILLATION_AMPLITUDE = 0.03
OSCILLATION_CYCLES = 4
NOISE_AMPLITUDE = 0.005
DEFAULT_ENTRY_PRICE = 100.0


class PlaceholderSeriesGenerator:
    """Builds hourly trend + sine + noise bars between a symbol's first buy and last sell."""

    def __init__(self, seed: Optional[int] = None):
        self._seed = seed

    def _rng(self, symbol: str) -> random.Random:
        # Seeded per symbol so repeated refreshes draw the same curve
        if self._seed is not None:
            return random.Random(f"{self._seed}:{symbol}")
        return random.Random(symbol)

    def generate(self, symbol: str, orders: list[Order], now: datetime) -> list[Bar]:
        """
        Generate bars for `symbol` from its orders.

        Only filled orders count. Returns an empty list if the symbol was
        never bought.
        """
        symbol_orders = sorted(
            (o for o in orders if o.symbol == symbol and o.is_filled),
            key=lambda o: to_utc(o.effective_time),
        )
        buys = [o for o in symbol_orders if o.is_buy]
        if not buys:
            return []
        sells = [o for o in symbol_orders if not o.is_buy]

        first_buy = buys[0]
        start = to_utc(first_buy.effective_time)
        entry = first_buy.filled_price or DEFAULT_ENTRY_PRICE

        if sells:
            last_sell = sells[-1]
            end = to_utc(last_sell.effective_time)
            target = last_sell.filled_price if last_sell.filled_price is not None else entry
        else:
            end = to_utc(now)
            target = entry * (1 + DEFAULT_GAIN)

        hours = max(1, int((end - start).total_seconds() // 3600))
        rng = self._rng(symbol)
        bars = []
        for i in range(hours + 1):
            t = i / hours
            trend = entry + (target - entry) * t
            oscillation = entry * OSCILLATION_AMPLITUDE * math.sin(2 * math.pi * OSCILLATION_CYCLES * t)
            noise = rng.uniform(-NOISE_AMPLITUDE, NOISE_AMPLITUDE) * entry
            bars.append(Bar(time=start + timedelta(hours=i), close=round(trend + oscillation + noise, 2)))

        logger.info("Generated %d placeholder bars for %s", len(bars), symbol)
        return bars
