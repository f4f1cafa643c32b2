"""Alpha Vantage intraday market data provider."""

import logging
from typing import Any, Optional

import httpx

from perfboard.core.exceptions import UpstreamError
from perfboard.core.timezone import EASTERN_TZ, parse_datetime_utc
from perfboard.domain.models import Bar

logger = logging.getLogger(__name__)

SOURCE = "market-data"
TIME_SERIES_KEY = "Time Series (60min)"
CLOSE_KEY = "4. close"


def parse_intraday_series(payload: Any) -> list[Bar]:
    """
    Extract hourly closes from a TIME_SERIES_INTRADAY payload.

    Timestamps are naive US/Eastern strings. Rate-limit notes and error
    messages come back without the series key and yield an empty list.
    Duplicate timestamps collapse to the last one seen.
    """
    if not isinstance(payload, dict):
        return []
    series = payload.get(TIME_SERIES_KEY)
    if not isinstance(series, dict):
        note = payload.get("Note") or payload.get("Information") or payload.get("Error Message")
        if note:
            logger.warning("Market data provider returned no series: %s", note)
        return []

    by_time: dict = {}
    for stamp, values in series.items():
        try:
            when = parse_datetime_utc(stamp, default_tz=EASTERN_TZ)
            close = float(values[CLOSE_KEY])
        except (KeyError, TypeError, ValueError):
            logger.debug("Skipping garbled bar at %s", stamp)
            continue
        by_time[when] = close

    return [Bar(time=t, close=c) for t, c in sorted(by_time.items())]


class AlphaVantageProvider:
    """Market data provider backed by the Alpha Vantage REST API."""

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str],
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self._base_url)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def get_intraday_bars(self, symbol: str) -> list[Bar]:
        if not self._api_key:
            raise UpstreamError(SOURCE, "market data API key not configured")

        params = {
            "function": "TIME_SERIES_INTRADAY",
            "symbol": symbol,
            "interval": "60min",
            "outputsize": "full",
            "apikey": self._api_key,
        }
        try:
            response = await self._get_client().get("/query", params=params)
        except httpx.HTTPError as exc:
            raise UpstreamError(SOURCE, f"request for {symbol} failed: {exc}") from exc

        if response.status_code >= 400:
            raise UpstreamError(SOURCE, f"{symbol} returned {response.status_code}")
        try:
            payload = response.json()
        except ValueError:
            logger.warning("Market data for %s was not JSON", symbol)
            return []
        return parse_intraday_series(payload)
