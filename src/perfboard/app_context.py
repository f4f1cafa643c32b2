"""Application context: the composition root.

Builds one Cache Store and wires every provider and service around it. The
FastAPI lifespan creates an AppContext and stores it on `app.state`; tests
build their own with fake providers.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from perfboard.config.settings import Settings, get_settings
from perfboard.core.timezone import now_utc
from perfboard.providers import (
    AlpacaBrokerageProvider,
    AlphaVantageProvider,
    BrokerageProvider,
    HttpReasoningFeed,
    MarketDataProvider,
    ReasoningFeed,
    StaticSnapshotProvider,
)
from perfboard.repositories import CacheStore, InMemoryCacheStore
from perfboard.services import (
    AccountService,
    CacheGateway,
    CachePolicy,
    DashboardService,
    EquityHistoryService,
    EquityReconstructor,
    MarketDataService,
    PlaceholderSeriesGenerator,
    RefreshScheduler,
)

logger = logging.getLogger(__name__)


class AppContext:
    """
    Application context providing access to all services.

    Every collaborator can be overridden; anything not supplied is built
    from settings.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        brokerage: Optional[BrokerageProvider] = None,
        market_data: Optional[MarketDataProvider] = None,
        reasoning_feed: Optional[ReasoningFeed] = None,
        snapshots: Optional[StaticSnapshotProvider] = None,
        store: Optional[CacheStore] = None,
        clock: Callable[[], datetime] = now_utc,
    ):
        self.settings = settings or get_settings()
        s = self.settings

        self.store = store if store is not None else InMemoryCacheStore(clock=clock)
        self.cache = CacheGateway(
            self.store,
            CachePolicy.from_seconds(s.account_cache_ttl_seconds, s.market_data_cache_ttl_seconds),
        )

        self.brokerage = brokerage or AlpacaBrokerageProvider(
            base_url=s.broker_base_url,
            api_key=s.broker_api_key,
            secret_key=s.broker_secret_key,
        )
        self.market_data = market_data or AlphaVantageProvider(
            base_url=s.market_data_base_url,
            api_key=s.market_data_api_key,
        )
        self.reasoning_feed = reasoning_feed or HttpReasoningFeed(s.reasoning_feed_url)
        self.snapshots = snapshots or StaticSnapshotProvider(s.get_snapshot_dir())

        self.account_service = AccountService(
            provider=self.brokerage,
            cache=self.cache,
            order_limit=s.order_fetch_limit,
            date_overrides=self.snapshots.load_order_date_overrides(),
            supplemental_orders=self.snapshots.load_supplemental_orders(),
        )
        self.history_service = EquityHistoryService(
            provider=self.brokerage,
            account_service=self.account_service,
            cache=self.cache,
            reconstructor=EquityReconstructor(starting_cash=s.starting_cash),
            clock=clock,
        )
        self.market_data_service = MarketDataService(
            provider=self.market_data,
            snapshots=self.snapshots,
            placeholder=PlaceholderSeriesGenerator(),
            cache=self.cache,
            benchmark_symbols=s.benchmark_symbols,
            clock=clock,
        )
        self.dashboard_service = DashboardService(
            account_service=self.account_service,
            history_service=self.history_service,
            market_data_service=self.market_data_service,
            reasoning_feed=self.reasoning_feed,
            benchmark_symbols=s.benchmark_symbols,
            equity_trust_floor=s.equity_trust_floor,
            staleness_threshold_hours=s.staleness_threshold_hours,
            staleness_fill_cap_hours=s.staleness_fill_cap_hours,
            activity_limit=s.activity_order_limit,
            clock=clock,
        )
        self.scheduler = RefreshScheduler(self.dashboard_service, s.refresh_interval_seconds)

    async def aclose(self) -> None:
        """Stop background work and close any HTTP clients this context owns."""
        await self.scheduler.stop()
        for provider in (self.brokerage, self.market_data, self.reasoning_feed):
            close = getattr(provider, "aclose", None)
            if close is not None:
                await close()
