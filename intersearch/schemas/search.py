"""Schemas for search results and the /search endpoint.

Outcome models serialize (by alias) to the exact /search response body:
{source, results} for index/web hits and {source, answer} for generated answers.
"""

from enum import Enum
from typing import Union

from pydantic import BaseModel, ConfigDict, Field


class SourceTag(str, Enum):
    """Which search source produced an item."""

    PRIMARY = "primary"
    WEB = "web"


class SearchItem(BaseModel):
    """One search hit from the primary index or the web."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str = ""
    snippet: str = ""
    link: str = ""
    source_tag: SourceTag = Field(..., alias="source")


class PrimaryOutcome(BaseModel):
    """Resolution satisfied by the primary (local) index."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    source: str = "primary"
    items: tuple[SearchItem, ...] = Field(default=(), alias="results")


class WebOutcome(BaseModel):
    """Resolution satisfied by web search."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    source: str = "google"
    items: tuple[SearchItem, ...] = Field(default=(), alias="results")


class GeneratedOutcome(BaseModel):
    """Resolution satisfied by the generative answer provider."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    source: str = "openai"
    answer_text: str = Field(..., alias="answer")


Outcome = Union[PrimaryOutcome, WebOutcome, GeneratedOutcome]


class CacheStatsResponse(BaseModel):
    """Response for GET /cache/stats."""

    size: int = Field(..., description="Live and not-yet-purged entries currently held.")
    max_entries: int = Field(..., description="Capacity before least-recently-used eviction.")
    ttl_seconds: float = Field(..., description="Per-entry time to live.")
    hits: int = Field(0, description="Lookups served from the cache since start or last clear.")
    misses: int = Field(0, description="Lookups that found no live entry.")
