"""
Unit tests for EquityHistoryService.

Tests cover:
- Provider variants tried in the documented order
- Stop at the first variant that returns points
- Order-driven reconstruction when every variant fails
- Reconstruction from the full filled-order history
- Empty history on exhaustion or reconstruction error (never cached)
- Cached success reuse
- ConfigurationError propagation
"""

from datetime import timedelta

import pytest

from perfboard.core.exceptions import ConfigurationError, UpstreamError
from perfboard.domain.models import OrderStatus, SeriesSource
from perfboard.services import AccountService, EquityHistoryService, EquityReconstructor
from perfboard.services.history_service import HISTORY_KEY

from tests.conftest import UnconfiguredBrokerageProvider, make_order, make_points, utc_datetime

ALL_VARIANTS = ["3M/1H", "all/1H", "1M/1H", "1M/1D", "1W/1H"]


class TestVariantOrder:
    @pytest.mark.asyncio
    async def test_first_variant_wins(self, brokerage, history_service):
        """
        GIVEN 3M/1H returns points
        WHEN history is requested
        THEN no other variant is queried and the source is the provider
        """
        brokerage.history[("3M", "1H")] = make_points(utc_datetime(2024, 6, 1, 14), [100000.0, 100500.0])

        history = await history_service.get_history()

        assert brokerage.history_calls == ["3M/1H"]
        assert history.source == SeriesSource.PROVIDER
        assert history.variant == "3M/1H"
        assert len(history.points) == 2

    @pytest.mark.asyncio
    async def test_empty_and_failing_variants_fall_through(self, brokerage, history_service):
        """
        GIVEN 3M/1H returns an empty array, all/1H raises and 1M/1H returns points
        WHEN history is requested
        THEN the variants are tried in order and 1M/1D is never queried
        """
        brokerage.history[("3M", "1H")] = []
        brokerage.history[("all", "1H")] = UpstreamError("brokerage", "500")
        brokerage.history[("1M", "1H")] = make_points(utc_datetime(2024, 6, 1, 14), [100000.0])

        history = await history_service.get_history()

        assert brokerage.history_calls == ["3M/1H", "all/1H", "1M/1H"]
        assert history.variant == "1M/1H"

    @pytest.mark.asyncio
    async def test_last_variant_is_weekly(self, brokerage, history_service):
        brokerage.history[("1W", "1H")] = make_points(utc_datetime(2024, 6, 10, 14), [100000.0])

        history = await history_service.get_history()

        assert brokerage.history_calls == ALL_VARIANTS
        assert history.variant == "1W/1H"


class TestReconstructionFallback:
    @pytest.mark.asyncio
    async def test_reconstructs_when_all_variants_fail(self, brokerage, history_service, fixed_now):
        """
        GIVEN every variant fails and the account has filled orders
        WHEN history is requested
        THEN the curve is rebuilt from orders and tagged as reconstructed
        """
        first_fill = fixed_now - timedelta(days=2)
        brokerage.orders = [
            make_order("XYZ", "buy", 10, 100.0, first_fill),
            make_order("XYZ", "sell", 10, 110.0, first_fill + timedelta(days=1)),
        ]

        history = await history_service.get_history()

        assert brokerage.history_calls == ALL_VARIANTS
        assert history.source == SeriesSource.RECONSTRUCTED
        assert history.points[0].equity == 100000.0
        assert history.points[-1].equity == 100100.0
        assert history.points[-1].time <= fixed_now

    @pytest.mark.asyncio
    async def test_exhaustion_returns_empty_and_is_not_cached(self, brokerage, history_service, store):
        """
        GIVEN every variant fails and there are no filled orders
        WHEN history is requested twice
        THEN both calls return an empty history and the chain runs both times
        """
        first = await history_service.get_history()
        second = await history_service.get_history()

        assert first.is_empty and second.is_empty
        assert first.source == SeriesSource.EMPTY
        assert brokerage.history_calls == ALL_VARIANTS * 2
        assert store.get(HISTORY_KEY) is None

    @pytest.mark.asyncio
    async def test_reconstruction_uses_full_fill_history(self, brokerage, cache, clock, fixed_now):
        """
        GIVEN an order list capped at the newest order
        AND an older buy that falls outside that cap
        WHEN every variant fails and history is reconstructed
        THEN the buy is still replayed from the filled-order history
        """
        first_fill = fixed_now - timedelta(days=3)
        brokerage.orders = [
            make_order("XYZ", "buy", 10, 100.0, first_fill, order_id="buy-1"),
            make_order("XYZ", "sell", 10, 110.0, first_fill + timedelta(days=1), order_id="sell-1"),
            make_order("XYZ", "buy", 5, 120.0, fixed_now - timedelta(hours=2), status=OrderStatus.CANCELED),
        ]
        accounts = AccountService(provider=brokerage, cache=cache, order_limit=1)
        service = EquityHistoryService(
            provider=brokerage,
            account_service=accounts,
            cache=cache,
            reconstructor=EquityReconstructor(starting_cash=100000.0),
            clock=clock,
        )

        history = await service.get_history()

        assert "filled-orders" in brokerage.calls
        assert "orders" not in brokerage.calls
        assert history.source == SeriesSource.RECONSTRUCTED
        assert history.points[0].time == first_fill.replace(minute=0, second=0, microsecond=0)
        assert history.points[-1].equity == 100100.0

    @pytest.mark.asyncio
    async def test_reconstruction_error_yields_empty_history(self, brokerage, cache, store, clock, fixed_now):
        """
        GIVEN every variant fails and the account has filled orders
        AND the reconstructor raises
        WHEN history is requested
        THEN an empty history comes back and nothing is cached
        """

        class BrokenReconstructor(EquityReconstructor):
            def reconstruct(self, orders, now):
                raise RuntimeError("ledger replay failed")

        brokerage.orders = [make_order("XYZ", "buy", 10, 100.0, fixed_now - timedelta(days=1))]
        service = EquityHistoryService(
            provider=brokerage,
            account_service=AccountService(provider=brokerage, cache=cache),
            cache=cache,
            reconstructor=BrokenReconstructor(),
            clock=clock,
        )

        history = await service.get_history()

        assert history.is_empty
        assert history.source == SeriesSource.EMPTY
        assert brokerage.history_calls == ALL_VARIANTS
        assert store.get(HISTORY_KEY) is None


class TestHistoryCaching:
    @pytest.mark.asyncio
    async def test_fresh_history_skips_provider(self, brokerage, history_service, clock):
        brokerage.history[("3M", "1H")] = make_points(utc_datetime(2024, 6, 1, 14), [100000.0])

        await history_service.get_history()
        clock.advance(minutes=4)
        await history_service.get_history()

        assert brokerage.history_calls == ["3M/1H"]

    @pytest.mark.asyncio
    async def test_stale_history_is_refetched(self, brokerage, history_service, clock):
        brokerage.history[("3M", "1H")] = make_points(utc_datetime(2024, 6, 1, 14), [100000.0])

        await history_service.get_history()
        clock.advance(minutes=6)
        await history_service.get_history()

        assert brokerage.history_calls == ["3M/1H", "3M/1H"]


@pytest.mark.asyncio
async def test_missing_credentials_propagate(cache, clock):
    """
    GIVEN a brokerage provider without credentials
    WHEN history is requested
    THEN ConfigurationError reaches the caller instead of an empty history
    """
    provider = UnconfiguredBrokerageProvider()
    service = EquityHistoryService(
        provider=provider,
        account_service=AccountService(provider=provider, cache=cache),
        cache=cache,
        reconstructor=EquityReconstructor(),
        clock=clock,
    )

    with pytest.raises(ConfigurationError):
        await service.get_history()
