"""
Shared fixtures: scripted source adapters and a controllable clock.

No network access: every adapter here returns canned outcomes or raises canned errors.
"""

import asyncio
from typing import Callable, Sequence

import pytest

from intersearch.core.result_cache import ResultCache
from intersearch.schemas.search import Outcome, SearchItem
from intersearch.services.base import SourceAdapter
from intersearch.services.fallback import FallbackResolver


class FakeSource(SourceAdapter):
    """Returns `outcome` or raises `error`; records every call as (query, context)."""

    def __init__(
        self,
        name: str,
        outcome: Outcome | None = None,
        error: Exception | None = None,
        gate: asyncio.Event | None = None,
    ) -> None:
        self.name = name
        self.outcome = outcome
        self.error = error
        self.gate = gate
        self.calls: list[tuple[str, tuple[SearchItem, ...]]] = []

    async def resolve(self, query: str, prior_context: Sequence[SearchItem] = ()) -> Outcome:
        self.calls.append((query, tuple(prior_context)))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        assert self.outcome is not None, f"{self.name} has no scripted outcome"
        return self.outcome


class FakeClock:
    """Monotonic timer for ResultCache that only moves when told to."""

    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> ResultCache:
    return ResultCache(max_entries=500, ttl_seconds=300, timer=clock)


@pytest.fixture
def make_resolver(cache: ResultCache) -> Callable[..., FallbackResolver]:
    """Build a resolver over the per-test cache from three FakeSources."""

    def _make(primary: FakeSource, web: FakeSource, generative: FakeSource, coalesce: bool = False) -> FallbackResolver:
        return FallbackResolver(cache=cache, primary=primary, web=web, generative=generative, coalesce=coalesce)

    return _make
