"""
Unit tests for the Cache Store and freshness policy.

Tests cover:
- Store get/put with age
- Whole-entry replacement
- Per-class thresholds (5 minutes vs. 7 days)
- Positions hit at +4 minutes, refetch at +6 minutes
- Cache status listing
"""

from datetime import timedelta

import pytest

from perfboard.domain.models import KeyClass
from perfboard.repositories import InMemoryCacheStore
from perfboard.services import AccountService, CacheGateway, CachePolicy, cache_key, key_class_of

from tests.conftest import ScriptedBrokerageProvider, make_position


class TestInMemoryCacheStore:
    """Tests for the raw key -> (value, fetched_at) map."""

    def test_get_missing_key_returns_none(self, store: InMemoryCacheStore):
        """
        GIVEN an empty store
        WHEN I get a key that was never written
        THEN None is returned
        """
        assert store.get("positions") is None

    def test_get_returns_value_and_age(self, store, clock):
        """
        GIVEN a value written at t
        WHEN I read it at t+90s
        THEN the value comes back with an age of 90 seconds
        """
        store.put("positions", ["a"])
        clock.advance(seconds=90)

        value, age = store.get("positions")

        assert value == ["a"]
        assert age == timedelta(seconds=90)

    def test_put_replaces_whole_entry(self, store, clock):
        """
        GIVEN an entry written earlier
        WHEN the same key is written again
        THEN the value is replaced and the age restarts at zero
        """
        store.put("orders:500", [1, 2, 3])
        clock.advance(minutes=10)
        store.put("orders:500", [4])

        value, age = store.get("orders:500")

        assert value == [4]
        assert age == timedelta(0)
        assert len(store) == 1

    def test_entries_sorted_by_key(self, store):
        store.put("positions", [])
        store.put("account", None)
        store.put("price-bars:SPY", [])

        assert [e.key for e in store.entries()] == ["account", "positions", "price-bars:SPY"]


class TestCachePolicy:
    """Tests for per-class freshness thresholds."""

    def test_cache_key_prefix_round_trips_key_class(self):
        key = cache_key(KeyClass.PRICE_BARS, "SPY", "2024-06-01", "2024-06-15")

        assert key == "price-bars:SPY:2024-06-01:2024-06-15"
        assert key_class_of(key) == KeyClass.PRICE_BARS

    def test_unknown_prefix_has_no_key_class(self):
        assert key_class_of("something-else:1") is None

    @pytest.mark.parametrize(
        "key_class",
        [KeyClass.ACCOUNT, KeyClass.POSITIONS, KeyClass.ORDERS, KeyClass.EQUITY_HISTORY],
    )
    def test_account_classes_expire_after_five_minutes(self, key_class):
        policy = CachePolicy()

        assert policy.is_fresh(key_class, timedelta(minutes=4, seconds=59))
        assert not policy.is_fresh(key_class, timedelta(minutes=5))

    def test_price_bars_stay_fresh_for_seven_days(self):
        policy = CachePolicy()

        assert policy.is_fresh(KeyClass.PRICE_BARS, timedelta(days=6, hours=23))
        assert not policy.is_fresh(KeyClass.PRICE_BARS, timedelta(days=7))

    def test_from_seconds_overrides_thresholds(self):
        policy = CachePolicy.from_seconds(60, 3600)

        assert policy.threshold(KeyClass.POSITIONS) == timedelta(seconds=60)
        assert policy.threshold(KeyClass.PRICE_BARS) == timedelta(hours=1)


class TestCacheGateway:
    """Tests for hit/miss behavior through services."""

    @pytest.mark.asyncio
    async def test_positions_hit_within_threshold_and_refetch_after(self, store, clock):
        """
        GIVEN positions cached at t with a 5-minute threshold
        WHEN they are queried at t+4min and again at t+6min
        THEN the first query is served from cache and the second refetches
             and fully replaces the entry
        """
        provider = ScriptedBrokerageProvider(positions=[make_position("AAPL")])
        service = AccountService(provider=provider, cache=CacheGateway(store))

        first = await service.get_positions()
        assert provider.calls == ["positions"]

        provider.positions = [make_position("MSFT")]
        clock.advance(minutes=4)
        cached = await service.get_positions()

        assert provider.calls == ["positions"]
        assert [p.symbol for p in cached] == ["AAPL"]

        clock.advance(minutes=2)
        refreshed = await service.get_positions()

        assert provider.calls == ["positions", "positions"]
        assert [p.symbol for p in refreshed] == ["MSFT"]
        value, age = store.get("positions")
        assert [p.symbol for p in value] == ["MSFT"]
        assert age == timedelta(0)
        assert first != refreshed

    def test_status_reports_age_and_validity(self, store, clock):
        """
        GIVEN an account entry and a price-bars entry written 10 minutes ago
        WHEN cache status is listed
        THEN the account entry is expired and the price bars are still valid
        """
        gateway = CacheGateway(store)
        gateway.store(cache_key(KeyClass.ACCOUNT), {"cash": 1})
        gateway.store(cache_key(KeyClass.PRICE_BARS, "SPY"), [])
        clock.advance(minutes=10)

        rows = {row["key"]: row for row in gateway.status()}

        assert rows["account"]["is_valid"] is False
        assert rows["account"]["key_class"] == "account"
        assert rows["price-bars:SPY"]["is_valid"] is True
        assert rows["price-bars:SPY"]["age_seconds"] == 600.0

    def test_lookup_ignores_stale_entries(self, store, clock):
        gateway = CacheGateway(store)
        gateway.store("orders:500", ["x"])
        clock.advance(minutes=6)

        assert gateway.lookup("orders:500") is None
