"""Upstream providers module."""

from perfboard.providers.brokerage_provider import BrokerageProvider
from perfboard.providers.alpaca_provider import AlpacaBrokerageProvider
from perfboard.providers.market_data_provider import MarketDataProvider
from perfboard.providers.alpha_vantage_provider import AlphaVantageProvider
from perfboard.providers.snapshot_provider import StaticSnapshotProvider
from perfboard.providers.reasoning_feed import ReasoningFeed, HttpReasoningFeed

__all__ = [
    "BrokerageProvider",
    "AlpacaBrokerageProvider",
    "MarketDataProvider",
    "AlphaVantageProvider",
    "StaticSnapshotProvider",
    "ReasoningFeed",
    "HttpReasoningFeed",
]
