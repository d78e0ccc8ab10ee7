# Run from project root: uvicorn intersearch.main:app --reload
# or: python -m intersearch.main (listens on HOST:PORT)

import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from intersearch.api.handlers import validation_error_handler
from intersearch.api.routes import router
from intersearch.core.config import (
    CACHE_MAX_ENTRIES,
    CACHE_TTL_SECONDS,
    COALESCE_INFLIGHT,
    HOST,
    LOG_LEVEL,
    PORT,
    PRIMARY_INDEX_MAX_RESULTS,
    PRIMARY_INDEX_PATH,
)
from intersearch.core.result_cache import ResultCache
from intersearch.services.answer_service import OpenAIAnswerAdapter
from intersearch.services.fallback import FallbackResolver
from intersearch.services.primary_index import KeywordIndexAdapter
from intersearch.services.web_search import GoogleSearchAdapter

logging.basicConfig(level=LOG_LEVEL)

logger = logging.getLogger(__name__)


def build_resolver(answer_adapter: OpenAIAnswerAdapter | None = None) -> FallbackResolver:
    """Wire the default cache and source chain from config."""
    return FallbackResolver(
        cache=ResultCache(max_entries=CACHE_MAX_ENTRIES, ttl_seconds=CACHE_TTL_SECONDS),
        primary=KeywordIndexAdapter(path=PRIMARY_INDEX_PATH or None, max_results=PRIMARY_INDEX_MAX_RESULTS),
        web=GoogleSearchAdapter(),
        generative=answer_adapter or OpenAIAnswerAdapter(),
        coalesce=COALESCE_INFLIGHT,
    )


def create_app(
    resolver: FallbackResolver | None = None,
    answer_adapter: OpenAIAnswerAdapter | None = None,
) -> FastAPI:
    """Build the app. /ai shares the resolver's generative adapter unless one is passed."""
    if resolver is None:
        answer_adapter = answer_adapter or OpenAIAnswerAdapter()
        resolver = build_resolver(answer_adapter)
    elif answer_adapter is None:
        answer_adapter = resolver.generative
    app = FastAPI(title="InterSearch")
    app.state.answer_adapter = answer_adapter
    app.state.resolver = resolver
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logger.info("InterSearch running on http://%s:%d", HOST, PORT)
    uvicorn.run(app, host=HOST, port=PORT)
