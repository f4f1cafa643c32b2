"""Alpaca REST brokerage provider."""

import logging
from typing import Any, Optional

import httpx

from perfboard.core.exceptions import ConfigurationError, MalformedPayloadError, UpstreamError
from perfboard.core.timezone import from_epoch_seconds, parse_datetime_utc
from perfboard.domain.models import AccountSnapshot, EquityPoint, Order, OrderSide, Position

logger = logging.getLogger(__name__)

SOURCE = "brokerage"


def _as_float(payload: dict, field: str, required: bool = True) -> Optional[float]:
    value = payload.get(field)
    if value is None or value == "":
        if required:
            raise MalformedPayloadError(SOURCE, f"missing field '{field}'")
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise MalformedPayloadError(SOURCE, f"field '{field}' is not numeric: {value!r}") from exc


def parse_account(payload: Any) -> AccountSnapshot:
    """Convert an /v2/account payload into an AccountSnapshot."""
    if not isinstance(payload, dict):
        raise MalformedPayloadError(SOURCE, "account payload is not an object")
    return AccountSnapshot(
        portfolio_value=_as_float(payload, "portfolio_value"),
        cash=_as_float(payload, "cash"),
        buying_power=_as_float(payload, "buying_power", required=False) or 0.0,
        equity=_as_float(payload, "equity"),
        account_number=payload.get("account_number"),
        status=payload.get("status"),
    )


def parse_position(payload: dict) -> Position:
    """Convert one /v2/positions element into a Position."""
    if not payload.get("symbol"):
        raise MalformedPayloadError(SOURCE, "position without symbol")
    return Position(
        symbol=payload["symbol"],
        quantity=_as_float(payload, "qty"),
        average_entry_price=_as_float(payload, "avg_entry_price"),
        current_price=_as_float(payload, "current_price"),
        market_value=_as_float(payload, "market_value"),
        unrealized_pnl=_as_float(payload, "unrealized_pl"),
        unrealized_pnl_percent=_as_float(payload, "unrealized_plpc", required=False),
        cost_basis=_as_float(payload, "cost_basis", required=False),
        side=payload.get("side") or "long",
    )


def parse_order(payload: dict) -> Order:
    """Convert one /v2/orders element into an Order."""
    for field in ("id", "symbol", "side", "submitted_at"):
        if not payload.get(field):
            raise MalformedPayloadError(SOURCE, f"order missing '{field}'")

    quantity = _as_float(payload, "filled_qty", required=False)
    if not quantity:
        quantity = _as_float(payload, "qty", required=False)
    if quantity is None:
        raise MalformedPayloadError(SOURCE, f"order {payload['id']} has no quantity")

    filled_at = payload.get("filled_at")
    try:
        side = OrderSide(str(payload["side"]).lower())
    except ValueError as exc:
        raise MalformedPayloadError(SOURCE, f"unknown order side {payload['side']!r}") from exc

    return Order(
        id=str(payload["id"]),
        symbol=payload["symbol"],
        side=side,
        quantity=quantity,
        filled_price=_as_float(payload, "filled_avg_price", required=False),
        submitted_at=parse_datetime_utc(payload["submitted_at"]),
        filled_at=parse_datetime_utc(filled_at) if filled_at else None,
        status=payload.get("status") or "other",
        order_type=payload.get("type") or payload.get("order_type") or "market",
    )


def parse_portfolio_history(payload: Any) -> list[EquityPoint]:
    """
    Convert a portfolio history payload into EquityPoints.

    Null equity values (hours without a valuation) are skipped.
    """
    if not isinstance(payload, dict):
        raise MalformedPayloadError(SOURCE, "history payload is not an object")
    equity = payload.get("equity")
    timestamps = payload.get("timestamp")
    if not isinstance(equity, list) or not isinstance(timestamps, list):
        raise MalformedPayloadError(SOURCE, "history payload lacks equity/timestamp arrays")
    if len(equity) != len(timestamps):
        raise MalformedPayloadError(SOURCE, "history arrays have different lengths")

    points: list[EquityPoint] = []
    for ts, value in zip(timestamps, equity):
        if ts is None or value is None:
            continue
        points.append(EquityPoint(time=from_epoch_seconds(ts), equity=float(value)))
    points.sort(key=lambda p: p.time)
    return points


class AlpacaBrokerageProvider:
    """
    Brokerage provider backed by the Alpaca trading REST API.

    Missing credentials surface as ConfigurationError on the first request.
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str],
        secret_key: Optional[str],
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._secret_key = secret_key
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self._base_url)
        return self._client

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this provider created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def _request(self, path: str, params: Optional[dict] = None) -> Any:
        if not (self._api_key and self._secret_key):
            raise ConfigurationError("Brokerage API credentials not configured")

        headers = {
            "APCA-API-KEY-ID": self._api_key,
            "APCA-API-SECRET-KEY": self._secret_key,
        }
        try:
            response = await self._get_client().get(path, params=params, headers=headers)
        except httpx.HTTPError as exc:
            raise UpstreamError(SOURCE, f"request to {path} failed: {exc}") from exc

        if response.status_code >= 400:
            raise UpstreamError(
                SOURCE, f"{path} returned {response.status_code} {response.reason_phrase}"
            )
        try:
            return response.json()
        except ValueError as exc:
            raise MalformedPayloadError(SOURCE, f"{path} returned invalid JSON") from exc

    async def get_account(self) -> AccountSnapshot:
        return parse_account(await self._request("/v2/account"))

    async def get_positions(self) -> list[Position]:
        payload = await self._request("/v2/positions")
        if not isinstance(payload, list):
            raise MalformedPayloadError(SOURCE, "positions payload is not a list")
        positions = []
        for item in payload:
            try:
                positions.append(parse_position(item))
            except MalformedPayloadError as exc:
                logger.warning("Skipping position: %s", exc.message)
        return positions

    def _parse_orders(self, payload: Any) -> list[Order]:
        if not isinstance(payload, list):
            raise MalformedPayloadError(SOURCE, "orders payload is not a list")
        orders = []
        for item in payload:
            try:
                orders.append(parse_order(item))
            except MalformedPayloadError as exc:
                logger.warning("Skipping order: %s", exc.message)
        return orders

    async def get_orders(self, limit: int = 500) -> list[Order]:
        payload = await self._request(
            "/v2/orders",
            params={"status": "all", "limit": limit, "direction": "desc"},
        )
        return self._parse_orders(payload)

    async def get_filled_orders(self, page_size: int = 500, max_pages: int = 20) -> list[Order]:
        """
        Every filled order, oldest first.

        Walks closed orders in ascending submit order, one page at a time,
        passing the last submit time of each page as the next page's `after`.
        """
        filled: dict[str, Order] = {}
        after: Optional[str] = None
        for _ in range(max_pages):
            params = {"status": "closed", "limit": page_size, "direction": "asc"}
            if after:
                params["after"] = after
            payload = await self._request("/v2/orders", params=params)
            for order in self._parse_orders(payload):
                if order.is_filled:
                    filled[order.id] = order
            if len(payload) < page_size:
                break
            after = payload[-1].get("submitted_at") if isinstance(payload[-1], dict) else None
            if not after:
                break
        else:
            logger.warning("Filled order history truncated after %d pages", max_pages)
        return sorted(filled.values(), key=lambda o: (o.effective_time, o.id))

    async def get_portfolio_history(self, period: str, timeframe: str) -> list[EquityPoint]:
        payload = await self._request(
            "/v2/account/portfolio/history",
            params={"period": period, "timeframe": timeframe},
        )
        return parse_portfolio_history(payload)
