"""External trade-reasoning feed."""

import logging
from typing import Any, Optional, Protocol

import httpx

from perfboard.core.exceptions import UpstreamError
from perfboard.core.timezone import parse_datetime_utc
from perfboard.domain.views import ReasoningEntry

logger = logging.getLogger(__name__)

SOURCE = "reasoning-feed"


class ReasoningFeed(Protocol):
    """Source of `{timestamp, ticker, text}` notes merged into the activity log."""

    async def get_entries(self) -> list[ReasoningEntry]:
        ...


def parse_reasoning_entries(payload: Any) -> list[ReasoningEntry]:
    """Accept a list of `{timestamp, ticker, reasoning|text}` objects; skip bad rows."""
    if not isinstance(payload, list):
        return []
    entries = []
    for item in payload:
        if not isinstance(item, dict):
            continue
        try:
            entries.append(
                ReasoningEntry(
                    timestamp=parse_datetime_utc(item["timestamp"]),
                    ticker=str(item.get("ticker") or ""),
                    text=str(item.get("reasoning") or item.get("text") or ""),
                )
            )
        except (KeyError, TypeError, ValueError):
            continue
    return entries


class HttpReasoningFeed:
    """Fetches reasoning notes from a JSON endpoint; disabled when no URL is set."""

    def __init__(self, url: Optional[str], client: Optional[httpx.AsyncClient] = None):
        self._url = url
        self._client = client
        self._owns_client = client is None

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def get_entries(self) -> list[ReasoningEntry]:
        if not self._url:
            return []
        if self._client is None:
            self._client = httpx.AsyncClient()
        try:
            response = await self._client.get(self._url)
        except httpx.HTTPError as exc:
            raise UpstreamError(SOURCE, str(exc)) from exc
        if response.status_code >= 400:
            raise UpstreamError(SOURCE, f"returned {response.status_code}")
        try:
            return parse_reasoning_entries(response.json())
        except ValueError:
            logger.warning("Reasoning feed returned invalid JSON")
            return []
