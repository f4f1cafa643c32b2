"""Brokerage provider protocol."""

from typing import Protocol

from perfboard.domain.models import AccountSnapshot, EquityPoint, Order, Position


class BrokerageProvider(Protocol):
    """
    Protocol for brokerage account APIs.

    Implementations raise UpstreamError (or MalformedPayloadError) on failure
    and ConfigurationError when credentials are missing.
    """

    async def get_account(self) -> AccountSnapshot:
        """Fetch the current account balances."""
        ...

    async def get_positions(self) -> list[Position]:
        """Fetch open positions."""
        ...

    async def get_orders(self, limit: int = 500) -> list[Order]:
        """Fetch orders of every status, newest first."""
        ...

    async def get_filled_orders(self, page_size: int = 500, max_pages: int = 20) -> list[Order]:
        """Fetch every filled order in the account's history, oldest first."""
        ...

    async def get_portfolio_history(self, period: str, timeframe: str) -> list[EquityPoint]:
        """
        Fetch the equity curve for a (period, timeframe) query.

        period is one of 3M, 1M, 1W, all; timeframe is 1H or 1D.
        """
        ...
