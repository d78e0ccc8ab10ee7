"""
API route aggregator: register endpoints and delegate to handlers; no logic here.
"""

import logging
import time
from typing import Any

from fastapi import APIRouter, Body, Depends, Request

from intersearch.api.handlers import handle_ai, handle_search
from intersearch.schemas.assistant import AiResponse, HealthResponse
from intersearch.schemas.search import CacheStatsResponse
from intersearch.services.answer_service import OpenAIAnswerAdapter
from intersearch.services.fallback import FallbackResolver

logger = logging.getLogger(__name__)
router = APIRouter()


def get_resolver(request: Request) -> FallbackResolver:
    return request.app.state.resolver


def get_answer_adapter(request: Request) -> OpenAIAnswerAdapter:
    return request.app.state.answer_adapter


# --- System ---

@router.get("/health", response_model=HealthResponse, tags=["system"])
def health() -> HealthResponse:
    return HealthResponse(status="ok", ts=int(time.time() * 1000))


@router.get("/cache/stats", response_model=CacheStatsResponse, tags=["system"], summary="Result cache statistics")
def cache_stats(resolver: FallbackResolver = Depends(get_resolver)) -> CacheStatsResponse:
    return CacheStatsResponse(**resolver.cache.stats())


@router.delete("/cache", tags=["system"], summary="Drop every cached result")
def clear_cache(resolver: FallbackResolver = Depends(get_resolver)) -> dict:
    removed = resolver.cache.clear()
    return {"cleared": removed}


# --- Search ---

@router.get(
    "/search",
    tags=["search"],
    summary="Search with fallback (primary index → web → generative answer)",
    description="Returns {source, results} or {source, answer}, plus cached=true on a cache hit. 400 if q is empty, 500 if every source fails.",
)
async def search(q: str = "", resolver: FallbackResolver = Depends(get_resolver)):
    logger.info("[api:search] IN  q=%r", q)
    return await handle_search(resolver, q)


# --- Assistant ---

@router.post(
    "/ai",
    response_model=AiResponse,
    tags=["assistant"],
    summary="Ask the assistant directly (no search fallback)",
    description="400 if prompt is missing or blank, 500 on provider failure.",
)
async def ask_assistant(
    body: Any = Body(None, examples=[{"prompt": "What is the capital of France?"}]),
    answers: OpenAIAnswerAdapter = Depends(get_answer_adapter),
):
    logger.info("[api:ai] IN  body_type=%s", type(body).__name__)
    return await handle_ai(answers, body)
