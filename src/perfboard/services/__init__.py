"""Service layer - fetch strategies and series analytics."""

from perfboard.services.cache_policy import CacheGateway, CachePolicy, cache_key, key_class_of
from perfboard.services.fallback_chain import FallbackStep, FetchResult, run_chain
from perfboard.services.reconstruction import EquityReconstructor
from perfboard.services.placeholder_series import PlaceholderSeriesGenerator
from perfboard.services.account_service import AccountService
from perfboard.services.history_service import EquityHistoryService
from perfboard.services.market_data_service import MarketDataService
from perfboard.services.dashboard_service import DashboardService
from perfboard.services.refresh_scheduler import RefreshScheduler

__all__ = [
    "CacheGateway",
    "CachePolicy",
    "cache_key",
    "key_class_of",
    "FallbackStep",
    "FetchResult",
    "run_chain",
    "EquityReconstructor",
    "PlaceholderSeriesGenerator",
    "AccountService",
    "EquityHistoryService",
    "MarketDataService",
    "DashboardService",
    "RefreshScheduler",
]
