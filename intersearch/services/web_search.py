"""
Web search: Google Programmable Search (Custom Search JSON API).

Responsibility: Fetch the top web results for a query and map them to SearchItems.
An empty result list is a valid outcome; transport and API errors are raised
as SourceErrors for the resolver to absorb.
"""

import logging
from typing import Any, Sequence

import httpx

from intersearch.core.config import (
    GOOGLE_API_KEY,
    GOOGLE_CX,
    GOOGLE_SEARCH_URL,
    WEB_SEARCH_MAX_RESULTS,
    WEB_SEARCH_TIMEOUT,
)
from intersearch.core.errors import (
    NotConfiguredError,
    UpstreamProtocolError,
    UpstreamUnavailableError,
)
from intersearch.schemas.search import SearchItem, SourceTag, WebOutcome
from intersearch.services.base import SourceAdapter

logger = logging.getLogger(__name__)


def _to_item(raw: dict[str, Any]) -> SearchItem:
    return SearchItem(
        title=str(raw.get("title") or ""),
        snippet=str(raw.get("snippet") or ""),
        link=str(raw.get("link") or ""),
        source_tag=SourceTag.WEB,
    )


class GoogleSearchAdapter(SourceAdapter):
    """Web search adapter. Pass `client` to reuse (or mock) the HTTP transport."""

    name = "google"

    def __init__(
        self,
        api_key: str = GOOGLE_API_KEY,
        cx: str = GOOGLE_CX,
        url: str = GOOGLE_SEARCH_URL,
        max_results: int = WEB_SEARCH_MAX_RESULTS,
        timeout: float = WEB_SEARCH_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.api_key = api_key
        self.cx = cx
        self.url = url
        self.max_results = max_results
        self.timeout = timeout
        self._client = client

    async def _get(self, params: dict[str, str]) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(self.url, params=params)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.get(self.url, params=params)

    async def resolve(self, query: str, prior_context: Sequence[SearchItem] = ()) -> WebOutcome:
        if not self.api_key or not self.cx:
            raise NotConfiguredError("Google API key or CX not configured.", source=self.name)
        logger.info("[web_search:resolve] IN  query=%r num=%d", query, self.max_results)
        params = {"key": self.api_key, "cx": self.cx, "q": query, "num": str(self.max_results)}
        try:
            response = await self._get(params)
        except httpx.HTTPError as e:
            raise UpstreamUnavailableError(f"Google search request failed: {e}", source=self.name) from e
        if not response.is_success:
            logger.warning("[web_search:resolve] Google API error %s: %s", response.status_code, response.text[:200])
            raise UpstreamUnavailableError(
                f"Google API error {response.status_code}",
                source=self.name,
                status_code=response.status_code,
            )
        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamProtocolError("Google API returned a non-JSON body", source=self.name) from e
        if not isinstance(data, dict):
            raise UpstreamProtocolError("Google API response is not a JSON object", source=self.name)
        raw_items = data.get("items") or []
        if not isinstance(raw_items, list):
            raise UpstreamProtocolError("Google API 'items' is not a list", source=self.name)
        items = tuple(_to_item(it) for it in raw_items[: self.max_results] if isinstance(it, dict))
        logger.info("[web_search:resolve] OUT items=%d links=%s", len(items), [it.link for it in items])
        return WebOutcome(items=items)
