"""
Fallback resolver: cache → primary index → web search → generative answer.

Responsibility: Try sources strictly in order and return the first usable
outcome, caching it. Primary and web failures are absorbed (logged, never
raised); web results, even an empty list, are passed to the generative step as
context. A generative failure is terminal. No retries, no backtracking.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Sequence

from intersearch.core.errors import AllSourcesExhaustedError, SourceError
from intersearch.core.result_cache import ResultCache, normalize_query
from intersearch.schemas.search import (
    GeneratedOutcome,
    Outcome,
    PrimaryOutcome,
    SearchItem,
    WebOutcome,
)
from intersearch.services.base import SourceAdapter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    outcome: Outcome
    cached: bool = False


class FallbackResolver:
    """Resolve queries through the ordered source chain. Adapters and cache are injected."""

    def __init__(
        self,
        cache: ResultCache,
        primary: SourceAdapter,
        web: SourceAdapter,
        generative: SourceAdapter,
        coalesce: bool = False,
    ) -> None:
        self.cache = cache
        self.primary = primary
        self.web = web
        self.generative = generative
        self.coalesce = coalesce
        self._inflight: dict[str, asyncio.Future] = {}

    async def resolve(self, query: str) -> Resolution:
        """
        Resolve a query. Raises ValueError for an empty query and
        AllSourcesExhaustedError when the generative fallback fails.
        Nothing is cached on failure.
        """
        key = normalize_query(query)
        if not key:
            raise ValueError("query must not be empty")

        cached = self.cache.lookup(key)
        if cached is not None:
            logger.info("[fallback:resolve] OUT query=%r source=%s cached=True", key, cached.source)
            return Resolution(outcome=cached, cached=True)

        if not self.coalesce:
            return Resolution(outcome=await self._run_chain(key))

        pending = self._inflight.get(key)
        if pending is None:
            pending = asyncio.ensure_future(self._run_chain(key))
            self._inflight[key] = pending
            pending.add_done_callback(lambda f, k=key: self._release(k, f))
        else:
            logger.info("[fallback:resolve] joining in-flight resolution query=%r", key)
        return Resolution(outcome=await asyncio.shield(pending))

    def _release(self, key: str, shared: asyncio.Future) -> None:
        self._inflight.pop(key, None)
        # retrieved here even when no waiter is left
        if not shared.cancelled():
            shared.exception()

    async def _run_chain(self, key: str) -> Outcome:
        primary = await self._try_search(self.primary, key)
        if primary is not None and primary.items:
            return self._finish(key, PrimaryOutcome(source=primary.source, items=primary.items))

        web = await self._try_search(self.web, key)
        context: Sequence[SearchItem] = ()
        if web is not None:
            if web.items:
                return self._finish(key, WebOutcome(source=web.source, items=web.items))
            context = web.items

        logger.info("[fallback:resolve] falling back to %s context_items=%d", self.generative.name, len(context))
        try:
            generated = await self.generative.resolve(key, context)
        except SourceError as e:
            logger.error("[fallback:resolve] %s failed, no sources left: %s", self.generative.name, e.message)
            raise AllSourcesExhaustedError(e.message) from e
        return self._finish(key, GeneratedOutcome(source=generated.source, answer_text=generated.answer_text))

    async def _try_search(self, adapter: SourceAdapter, key: str) -> Outcome | None:
        """Run a search source; a failure is logged and reported as None."""
        try:
            return await adapter.resolve(key, ())
        except SourceError as e:
            logger.warning("[fallback:resolve] %s search failed: %s", adapter.name, e.message)
            return None

    def _finish(self, key: str, outcome: Outcome) -> Outcome:
        self.cache.store(key, outcome)
        logger.info("[fallback:resolve] OUT query=%r source=%s cached=False", key, outcome.source)
        return outcome
