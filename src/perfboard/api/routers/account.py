"""Account endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends

from perfboard.api.deps import get_account_service, get_history_service
from perfboard.api.schemas import (
    AccountResponse,
    EquityHistoryResponse,
    OrderResponse,
    PositionResponse,
)
from perfboard.core.timezone import to_epoch_seconds
from perfboard.domain.models import Order
from perfboard.services import AccountService, EquityHistoryService

router = APIRouter(prefix="/account", tags=["account"])


def order_to_response(order: Order) -> OrderResponse:
    return OrderResponse(
        id=order.id,
        symbol=order.symbol,
        side=order.side.value,
        quantity=order.quantity,
        status=order.status.value,
        order_type=order.order_type,
        filled_price=order.filled_price,
        submitted_at=order.submitted_at,
        filled_at=order.filled_at,
    )


@router.get("", response_model=Optional[AccountResponse])
async def get_account(
    service: AccountService = Depends(get_account_service),
) -> Optional[AccountResponse]:
    """Get the account snapshot (null when unavailable)."""
    account = await service.get_account()
    if account is None:
        return None
    return AccountResponse.model_validate(account)


@router.get("/positions", response_model=list[PositionResponse])
async def get_positions(
    service: AccountService = Depends(get_account_service),
) -> list[PositionResponse]:
    """Get open positions."""
    positions = await service.get_positions()
    return [PositionResponse.model_validate(p) for p in positions]


@router.get("/orders", response_model=list[OrderResponse])
async def get_orders(
    service: AccountService = Depends(get_account_service),
) -> list[OrderResponse]:
    """Get orders of every status, newest first."""
    orders = await service.get_orders()
    return [order_to_response(o) for o in orders]


@router.get("/history", response_model=EquityHistoryResponse)
async def get_history(
    service: EquityHistoryService = Depends(get_history_service),
) -> EquityHistoryResponse:
    """Get the equity curve from the first fallback strategy that produced one."""
    history = await service.get_history()
    return EquityHistoryResponse(
        equity=[p.equity for p in history.points],
        timestamp=[to_epoch_seconds(p.time) for p in history.points],
        source=history.source.value,
        variant=history.variant,
    )
