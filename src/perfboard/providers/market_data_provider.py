"""Market data provider protocol and base types."""

from typing import Protocol

from perfboard.domain.models import Bar


class MarketDataProvider(Protocol):
    """
    Protocol for market data providers.

    Implementations fetch 60-minute bars over the provider's full available range.
    An empty list means the provider answered but had no usable series.
    """

    async def get_intraday_bars(self, symbol: str) -> list[Bar]:
        """Fetch hourly bars for a symbol, sorted ascending by time."""
        ...
