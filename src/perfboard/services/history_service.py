"""Equity history fetch with an ordered fallback chain."""

import logging
from datetime import datetime
from typing import Callable

from perfboard.core.timezone import now_utc
from perfboard.domain.models import KeyClass, SeriesSource
from perfboard.domain.views import EquityHistory
from perfboard.providers.brokerage_provider import BrokerageProvider
from perfboard.services.account_service import AccountService
from perfboard.services.cache_policy import CacheGateway, cache_key
from perfboard.services.fallback_chain import FallbackStep, FetchResult, run_chain
from perfboard.services.reconstruction import EquityReconstructor

logger = logging.getLogger(__name__)

HISTORY_KEY = cache_key(KeyClass.EQUITY_HISTORY)

# (period, timeframe) queries in decreasing preference
HISTORY_VARIANTS: tuple[tuple[str, str], ...] = (
    ("3M", "1H"),
    ("all", "1H"),
    ("1M", "1H"),
    ("1M", "1D"),
    ("1W", "1H"),
)

RECONSTRUCTION_STEP = "reconstruction"


class EquityHistoryService:
    """
    Produces the best available equity curve for the account.

    Provider variants are tried in order, then order-driven reconstruction.
    Exhaustion yields an explicitly empty history rather than an error.
    """

    def __init__(
        self,
        provider: BrokerageProvider,
        account_service: AccountService,
        cache: CacheGateway,
        reconstructor: EquityReconstructor,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._provider = provider
        self._account_service = account_service
        self._cache = cache
        self._reconstructor = reconstructor
        self._clock = clock

    def _variant_step(self, period: str, timeframe: str) -> FallbackStep[EquityHistory]:
        async def run() -> FetchResult[EquityHistory]:
            points = await self._provider.get_portfolio_history(period, timeframe)
            if not points:
                return FetchResult.failure("empty equity array")
            return FetchResult.success(
                EquityHistory(points=points, source=SeriesSource.PROVIDER, variant=f"{period}/{timeframe}")
            )

        return FallbackStep(name=f"{period}/{timeframe}", run=run)

    async def _reconstruct(self) -> FetchResult[EquityHistory]:
        fills = await self._account_service.get_fill_history()
        try:
            points = self._reconstructor.reconstruct(fills, self._clock())
        except Exception:
            logger.exception("Equity reconstruction failed")
            return FetchResult.failure("reconstruction raised")
        if not points:
            return FetchResult.failure("no filled orders")
        return FetchResult.success(EquityHistory(points=points, source=SeriesSource.RECONSTRUCTED))

    def steps(self) -> list[FallbackStep[EquityHistory]]:
        steps = [self._variant_step(period, timeframe) for period, timeframe in HISTORY_VARIANTS]
        steps.append(FallbackStep(name=RECONSTRUCTION_STEP, run=self._reconstruct))
        return steps

    async def get_history(self) -> EquityHistory:
        cached = self._cache.lookup(HISTORY_KEY)
        if cached is not None:
            return cached

        outcome = await run_chain(self.steps(), label="equity history")
        if not outcome.succeeded:
            return EquityHistory.empty()

        self._cache.store(HISTORY_KEY, outcome.value)
        return outcome.value
