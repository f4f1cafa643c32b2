"""Account, positions and orders with caching and graceful degradation."""

import dataclasses
import logging
from datetime import datetime
from typing import Optional

from perfboard.core.exceptions import ConfigurationError
from perfboard.domain.models import AccountSnapshot, KeyClass, Order, Position
from perfboard.providers.brokerage_provider import BrokerageProvider
from perfboard.services.cache_policy import CacheGateway, cache_key

logger = logging.getLogger(__name__)

ACCOUNT_KEY = cache_key(KeyClass.ACCOUNT)
POSITIONS_KEY = cache_key(KeyClass.POSITIONS)
FILLS_KEY = cache_key(KeyClass.ORDERS, "filled")


def apply_order_corrections(
    orders: list[Order],
    date_overrides: dict[str, datetime],
    supplemental: list[Order],
) -> list[Order]:
    """
    Apply local corrections to the brokerage order list.

    Overrides replace the submit time of matching orders. Supplemental orders
    are appended unless an order with the same id already exists. The result
    is sorted newest first by submit time.
    """
    corrected = []
    for order in orders:
        override = date_overrides.get(order.id)
        if override is not None:
            order = dataclasses.replace(order, submitted_at=override)
        corrected.append(order)

    known_ids = {o.id for o in corrected}
    for order in supplemental:
        if order.id not in known_ids:
            corrected.append(order)
            known_ids.add(order.id)

    corrected.sort(key=lambda o: o.submitted_at, reverse=True)
    return corrected


class AccountService:
    """
    Service for brokerage account state.

    Fresh cache hits skip the provider. Upstream failures yield None or an
    empty list and are never cached; ConfigurationError always propagates.
    """

    def __init__(
        self,
        provider: BrokerageProvider,
        cache: CacheGateway,
        order_limit: int = 500,
        date_overrides: Optional[dict[str, datetime]] = None,
        supplemental_orders: Optional[list[Order]] = None,
    ):
        self._provider = provider
        self._cache = cache
        self._order_limit = order_limit
        self._date_overrides = date_overrides or {}
        self._supplemental_orders = supplemental_orders or []

    @property
    def orders_key(self) -> str:
        return cache_key(KeyClass.ORDERS, self._order_limit)

    async def get_account(self) -> Optional[AccountSnapshot]:
        cached = self._cache.lookup(ACCOUNT_KEY)
        if cached is not None:
            return cached
        try:
            account = await self._provider.get_account()
        except ConfigurationError:
            raise
        except Exception as exc:
            logger.warning("Account fetch failed: %s", exc)
            return None
        self._cache.store(ACCOUNT_KEY, account)
        return account

    async def get_positions(self) -> list[Position]:
        cached = self._cache.lookup(POSITIONS_KEY)
        if cached is not None:
            return cached
        try:
            positions = await self._provider.get_positions()
        except ConfigurationError:
            raise
        except Exception as exc:
            logger.warning("Positions fetch failed: %s", exc)
            return []
        self._cache.store(POSITIONS_KEY, positions)
        return positions

    async def get_orders(self) -> list[Order]:
        """All orders (every status), corrected, newest first."""
        key = self.orders_key
        cached = self._cache.lookup(key)
        if cached is not None:
            return cached
        try:
            raw = await self._provider.get_orders(limit=self._order_limit)
        except ConfigurationError:
            raise
        except Exception as exc:
            logger.warning("Orders fetch failed: %s", exc)
            return []
        orders = apply_order_corrections(raw, self._date_overrides, self._supplemental_orders)
        self._cache.store(key, orders)
        return orders

    async def get_fill_history(self) -> list[Order]:
        """Every filled order, corrected, oldest first. Input for reconstruction."""
        cached = self._cache.lookup(FILLS_KEY)
        if cached is not None:
            return cached
        try:
            raw = await self._provider.get_filled_orders()
        except ConfigurationError:
            raise
        except Exception as exc:
            logger.warning("Fill history fetch failed: %s", exc)
            return []
        corrected = apply_order_corrections(raw, self._date_overrides, self._supplemental_orders)
        fills = [o for o in reversed(corrected) if o.is_filled]
        self._cache.store(FILLS_KEY, fills)
        return fills
