"""Dashboard endpoints."""

from fastapi import APIRouter, Depends

from perfboard.api.deps import get_dashboard_service
from perfboard.api.schemas import DashboardResponse
from perfboard.services import DashboardService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardResponse)
async def get_dashboard(
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardResponse:
    """Get the latest dashboard view, refreshing first if none exists."""
    view = await service.get_view()
    return DashboardResponse.model_validate(view)


@router.post("/refresh", response_model=DashboardResponse)
async def refresh_dashboard(
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardResponse:
    """Run a refresh cycle now."""
    view = await service.refresh()
    return DashboardResponse.model_validate(view)
