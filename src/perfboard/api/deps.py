"""Dependency injection for FastAPI."""

from fastapi import Request

from perfboard.app_context import AppContext
from perfboard.services import (
    AccountService,
    CacheGateway,
    DashboardService,
    EquityHistoryService,
    MarketDataService,
)


def get_context(request: Request) -> AppContext:
    """Provide the AppContext built by the application lifespan."""
    return request.app.state.context


def get_account_service(request: Request) -> AccountService:
    """Provide AccountService instance."""
    return get_context(request).account_service


def get_history_service(request: Request) -> EquityHistoryService:
    """Provide EquityHistoryService instance."""
    return get_context(request).history_service


def get_market_data_service(request: Request) -> MarketDataService:
    """Provide MarketDataService instance."""
    return get_context(request).market_data_service


def get_dashboard_service(request: Request) -> DashboardService:
    """Provide DashboardService instance."""
    return get_context(request).dashboard_service


def get_cache_gateway(request: Request) -> CacheGateway:
    """Provide CacheGateway instance."""
    return get_context(request).cache
