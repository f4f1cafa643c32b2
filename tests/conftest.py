"""
Pytest configuration and fixtures for the performance service tests.

This module provides:
- A controllable UTC clock
- A fresh in-memory Cache Store per test
- Scripted fake brokerage, market data and reasoning providers
- Factory helpers for orders, equity points and bars
- Service, AppContext and TestClient fixtures
"""

import json
import uuid
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, Optional, Union

import pytest
from fastapi.testclient import TestClient

from perfboard.app_context import AppContext
from perfboard.config.settings import Settings, reset_settings
from perfboard.core.exceptions import ConfigurationError, UpstreamError
from perfboard.core.timezone import UTC
from perfboard.domain.models import (
    AccountSnapshot,
    Bar,
    EquityPoint,
    Order,
    OrderSide,
    OrderStatus,
    Position,
)
from perfboard.domain.views import ReasoningEntry
from perfboard.providers import StaticSnapshotProvider
from perfboard.repositories import InMemoryCacheStore
from perfboard.services import (
    AccountService,
    CacheGateway,
    EquityHistoryService,
    EquityReconstructor,
    MarketDataService,
    PlaceholderSeriesGenerator,
)


# =============================================================================
# TIME HELPERS
# =============================================================================


def utc_datetime(
    year: int,
    month: int,
    day: int,
    hour: int = 10,
    minute: int = 0,
    second: int = 0,
) -> datetime:
    """Create an aware datetime in UTC."""
    return UTC.localize(datetime(year, month, day, hour, minute, second))


class FixedClock:
    """Clock returning a settable 'now'; advance() moves it forward."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def fixed_now() -> datetime:
    """Fixed 'now' timestamp for deterministic tests."""
    return utc_datetime(2024, 6, 15, 18, 0, 0)


@pytest.fixture
def clock(fixed_now) -> FixedClock:
    return FixedClock(fixed_now)


# =============================================================================
# FACTORIES
# =============================================================================


def make_order(
    symbol: str,
    side: Union[OrderSide, str],
    quantity: float,
    price: Optional[float],
    when: datetime,
    status: OrderStatus = OrderStatus.FILLED,
    filled_at: Optional[datetime] = None,
    order_id: Optional[str] = None,
) -> Order:
    """Build an order; filled orders default their fill time to `when`."""
    if filled_at is None and status == OrderStatus.FILLED:
        filled_at = when
    return Order(
        id=order_id or uuid.uuid4().hex[:12],
        symbol=symbol,
        side=side,
        quantity=quantity,
        filled_price=price,
        submitted_at=when,
        filled_at=filled_at,
        status=status,
    )


def make_points(start: datetime, values: list[float], step: timedelta = timedelta(hours=1)) -> list[EquityPoint]:
    """Equity points at `start`, `start + step`, ..."""
    return [EquityPoint(time=start + step * i, equity=v) for i, v in enumerate(values)]


def make_bars(times: list[datetime], closes: list[float]) -> list[Bar]:
    return [Bar(time=t, close=c) for t, c in zip(times, closes)]


def make_account(portfolio_value: float = 101000.0, cash: float = 51000.0) -> AccountSnapshot:
    return AccountSnapshot(
        portfolio_value=portfolio_value,
        cash=cash,
        buying_power=cash,
        equity=portfolio_value,
        account_number="PA123",
        status="ACTIVE",
    )


def make_position(
    symbol: str = "AAPL",
    quantity: float = 10.0,
    average_entry_price: float = 180.0,
    current_price: float = 190.0,
) -> Position:
    return Position(
        symbol=symbol,
        quantity=quantity,
        average_entry_price=average_entry_price,
        current_price=current_price,
        market_value=quantity * current_price,
        unrealized_pnl=quantity * (current_price - average_entry_price),
    )


# =============================================================================
# FAKE PROVIDERS
# =============================================================================


class ScriptedBrokerageProvider:
    """
    Brokerage provider with scripted responses.

    `history` maps (period, timeframe) to a list of points or an exception
    instance; missing variants raise UpstreamError. Every call is recorded.
    """

    def __init__(
        self,
        account: Optional[AccountSnapshot] = None,
        positions: Optional[list[Position]] = None,
        orders: Optional[list[Order]] = None,
        history: Optional[dict] = None,
    ):
        self.account = account or make_account()
        self.positions = positions or []
        self.orders = orders or []
        self.history = history or {}
        self.calls: list[str] = []

    async def get_account(self) -> AccountSnapshot:
        self.calls.append("account")
        return self.account

    async def get_positions(self) -> list[Position]:
        self.calls.append("positions")
        return list(self.positions)

    async def get_orders(self, limit: int = 500) -> list[Order]:
        self.calls.append("orders")
        return list(self.orders)[:limit]

    async def get_filled_orders(self, page_size: int = 500, max_pages: int = 20) -> list[Order]:
        self.calls.append("filled-orders")
        filled = [o for o in self.orders if o.is_filled]
        return sorted(filled, key=lambda o: (o.effective_time, o.id))

    async def get_portfolio_history(self, period: str, timeframe: str) -> list[EquityPoint]:
        self.calls.append(f"history:{period}/{timeframe}")
        result = self.history.get((period, timeframe))
        if result is None:
            raise UpstreamError("brokerage", f"{period}/{timeframe} unavailable")
        if isinstance(result, Exception):
            raise result
        return list(result)

    @property
    def history_calls(self) -> list[str]:
        return [c.split(":", 1)[1] for c in self.calls if c.startswith("history:")]


class FailingBrokerageProvider:
    """Brokerage provider that always raises an upstream error."""

    async def get_account(self) -> AccountSnapshot:
        raise UpstreamError("brokerage", "network unavailable")

    async def get_positions(self) -> list[Position]:
        raise UpstreamError("brokerage", "network unavailable")

    async def get_orders(self, limit: int = 500) -> list[Order]:
        raise UpstreamError("brokerage", "network unavailable")

    async def get_filled_orders(self, page_size: int = 500, max_pages: int = 20) -> list[Order]:
        raise UpstreamError("brokerage", "network unavailable")

    async def get_portfolio_history(self, period: str, timeframe: str) -> list[EquityPoint]:
        raise UpstreamError("brokerage", "network unavailable")


class UnconfiguredBrokerageProvider:
    """Brokerage provider with no credentials."""

    async def _fail(self):
        raise ConfigurationError("Brokerage API credentials not configured")

    async def get_account(self) -> AccountSnapshot:
        return await self._fail()

    async def get_positions(self) -> list[Position]:
        return await self._fail()

    async def get_orders(self, limit: int = 500) -> list[Order]:
        return await self._fail()

    async def get_filled_orders(self, page_size: int = 500, max_pages: int = 20) -> list[Order]:
        return await self._fail()

    async def get_portfolio_history(self, period: str, timeframe: str) -> list[EquityPoint]:
        return await self._fail()


class ScriptedMarketProvider:
    """Market data provider returning fixed bars per symbol (empty when unknown)."""

    def __init__(self, bars: Optional[dict[str, list[Bar]]] = None, fail: bool = False):
        self.bars = bars or {}
        self.fail = fail
        self.calls: list[str] = []

    async def get_intraday_bars(self, symbol: str) -> list[Bar]:
        self.calls.append(symbol)
        if self.fail:
            raise UpstreamError("market-data", "rate limited")
        return list(self.bars.get(symbol, []))


class StaticReasoningFeed:
    def __init__(self, entries: Optional[list[ReasoningEntry]] = None):
        self.entries = entries or []

    async def get_entries(self) -> list[ReasoningEntry]:
        return list(self.entries)


def write_benchmark_snapshot(directory: Path, symbol: str, bars: list[tuple[str, float]]) -> Path:
    path = directory / f"{symbol.lower()}_fallback.json"
    path.write_text(json.dumps({"bars": [{"t": t, "c": c} for t, c in bars]}), encoding="utf-8")
    return path


# =============================================================================
# CACHE AND SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def store(clock) -> InMemoryCacheStore:
    """Fresh Cache Store per test."""
    return InMemoryCacheStore(clock=clock)


@pytest.fixture
def cache(store) -> CacheGateway:
    return CacheGateway(store)


@pytest.fixture
def brokerage() -> ScriptedBrokerageProvider:
    return ScriptedBrokerageProvider()


@pytest.fixture
def market_provider() -> ScriptedMarketProvider:
    return ScriptedMarketProvider()


@pytest.fixture
def snapshot_dir(tmp_path) -> Path:
    directory = tmp_path / "snapshots"
    directory.mkdir()
    return directory


@pytest.fixture
def snapshots(snapshot_dir) -> StaticSnapshotProvider:
    return StaticSnapshotProvider(snapshot_dir)


@pytest.fixture
def account_service(brokerage, cache) -> AccountService:
    return AccountService(provider=brokerage, cache=cache)


@pytest.fixture
def history_service(brokerage, account_service, cache, clock) -> EquityHistoryService:
    return EquityHistoryService(
        provider=brokerage,
        account_service=account_service,
        cache=cache,
        reconstructor=EquityReconstructor(starting_cash=100000.0),
        clock=clock,
    )


@pytest.fixture
def market_data_service(market_provider, snapshots, cache, clock) -> MarketDataService:
    return MarketDataService(
        provider=market_provider,
        snapshots=snapshots,
        placeholder=PlaceholderSeriesGenerator(seed=7),
        cache=cache,
        clock=clock,
    )


# =============================================================================
# APPLICATION FIXTURES
# =============================================================================


@pytest.fixture
def test_settings(snapshot_dir) -> Settings:
    reset_settings()
    return Settings(
        broker_api_key="test-key",
        broker_secret_key="test-secret",
        market_data_api_key="test-market-key",
        fallback_snapshot_dir=snapshot_dir,
        auto_refresh_enabled=False,
    )


@pytest.fixture
def app_context_factory(test_settings, clock) -> Callable[..., AppContext]:
    """Factory building an AppContext wired to fakes."""

    def _create(
        brokerage=None,
        market_data=None,
        reasoning=None,
    ) -> AppContext:
        return AppContext(
            settings=test_settings,
            brokerage=brokerage or ScriptedBrokerageProvider(),
            market_data=market_data or ScriptedMarketProvider(),
            reasoning_feed=reasoning or StaticReasoningFeed(),
            clock=clock,
        )

    return _create


@pytest.fixture
def client_factory(app_context_factory):
    """Factory yielding TestClients whose app state holds a fake-wired AppContext."""
    from perfboard.main import app

    clients = []

    def _create(**kwargs) -> TestClient:
        app.state.context = app_context_factory(**kwargs)
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _create

    for client in clients:
        client.__exit__(None, None, None)
    if hasattr(app.state, "context"):
        del app.state.context


@pytest.fixture
def client(client_factory) -> TestClient:
    return client_factory()
