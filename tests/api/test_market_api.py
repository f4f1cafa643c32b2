"""
API tests for market data endpoints.

Tests cover:
- GET /market/benchmarks/{symbol}/bars
- GET /market/stocks/{symbol}/bars
- GET /market/cache-status
- Range validation
"""

from datetime import timedelta

from tests.conftest import (
    ScriptedBrokerageProvider,
    ScriptedMarketProvider,
    make_bars,
    make_order,
    utc_datetime,
    write_benchmark_snapshot,
)


class TestBenchmarkBars:
    def test_provider_bars(self, client_factory):
        start = utc_datetime(2024, 6, 3, 14)
        client = client_factory(
            market_data=ScriptedMarketProvider({"SPY": make_bars([start, start + timedelta(hours=1)], [530.0, 531.0])})
        )

        response = client.get("/market/benchmarks/spy/bars")

        assert response.status_code == 200
        data = response.json()
        assert data["symbol"] == "SPY"
        assert data["source"] == "provider"
        assert [b["c"] for b in data["bars"]] == [530.0, 531.0]

    def test_snapshot_fallback(self, client_factory, snapshot_dir):
        """
        GIVEN the market data provider is failing and a QQQ snapshot exists
        WHEN QQQ bars are requested
        THEN the snapshot bars are returned
        """
        write_benchmark_snapshot(snapshot_dir, "QQQ", [("2024-06-03T14:00:00Z", 450.0)])
        client = client_factory(market_data=ScriptedMarketProvider(fail=True))

        response = client.get("/market/benchmarks/QQQ/bars")

        assert response.status_code == 200
        data = response.json()
        assert data["source"] == "static-snapshot"
        assert data["bars"][0]["c"] == 450.0

    def test_no_data_is_null_bars(self, client):
        response = client.get("/market/benchmarks/SPY/bars")

        assert response.status_code == 200
        assert response.json()["bars"] is None

    def test_inverted_range_is_rejected(self, client):
        response = client.get("/market/benchmarks/SPY/bars?start=2024-06-10&end=2024-06-01")

        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"


class TestStockBars:
    def test_traded_symbol_gets_placeholder(self, client_factory, fixed_now):
        client = client_factory(
            brokerage=ScriptedBrokerageProvider(
                orders=[make_order("ABC", "buy", 3, 25.0, fixed_now - timedelta(hours=5))]
            )
        )

        response = client.get("/market/stocks/ABC/bars")

        assert response.status_code == 200
        data = response.json()
        assert data["source"] == "placeholder"
        assert len(data["bars"]) == 6

    def test_untraded_symbol_without_bars(self, client):
        response = client.get("/market/stocks/ZZZ/bars")

        assert response.status_code == 200
        assert response.json()["bars"] is None


class TestCacheStatus:
    def test_lists_entries_with_validity(self, client):
        """
        GIVEN the account has been fetched once
        WHEN cache status is requested
        THEN the account entry is listed as valid with age 0
        """
        client.get("/account")

        response = client.get("/market/cache-status")

        assert response.status_code == 200
        entries = {e["key"]: e for e in response.json()["entries"]}
        assert entries["account"]["key_class"] == "account"
        assert entries["account"]["is_valid"] is True
        assert entries["account"]["age_seconds"] == 0.0

    def test_empty_cache(self, client):
        response = client.get("/market/cache-status")

        assert response.status_code == 200
        assert response.json() == {"entries": []}
