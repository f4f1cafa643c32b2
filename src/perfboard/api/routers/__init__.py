"""API routers package."""

from perfboard.api.routers.account import router as account_router
from perfboard.api.routers.market import router as market_router
from perfboard.api.routers.dashboard import router as dashboard_router

__all__ = [
    "account_router",
    "market_router",
    "dashboard_router",
]
