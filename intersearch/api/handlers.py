"""
API handlers: validate request data, call services, map results/errors to HTTP.

Responsibility: Bridge HTTP types and services. Marshalling and exception-to-HTTP mapping.
Lives in the API layer so services stay free of FastAPI/HTTP types. Error bodies
are {"error": message}.
"""

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from intersearch.core.errors import AllSourcesExhaustedError, SourceError
from intersearch.schemas.assistant import AiRequest, AiResponse
from intersearch.services.answer_service import OpenAIAnswerAdapter
from intersearch.services.fallback import FallbackResolver

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Unparseable request bodies are a 400 with the same {"error"} shape as every other failure."""
    logger.info("[api:validation] %s %s rejected: %s", request.method, request.url.path, exc.errors()[:1])
    if request.url.path == "/ai":
        return error_response(400, "prompt required")
    return error_response(400, "Invalid request")


def prompt_from_body(body: Any) -> str:
    """Read {"prompt": ...} from a JSON body. Numbers are accepted as text; anything else yields ""."""
    if not isinstance(body, dict):
        return ""
    try:
        req = AiRequest.model_validate(body)
    except ValidationError:
        return ""
    return "" if req.prompt is None else str(req.prompt).strip()


async def handle_search(resolver: FallbackResolver, q: str | None) -> dict[str, Any] | JSONResponse:
    """Run the fallback chain for ?q=. 400 on empty query, 500 when every source is exhausted."""
    query = (q or "").strip()
    if not query:
        return error_response(400, "Missing ?q=")
    try:
        resolution = await resolver.resolve(query)
    except AllSourcesExhaustedError as e:
        logger.exception("[api:search] all sources exhausted query=%r", query)
        return error_response(500, e.message)
    except Exception as e:
        logger.exception("[api:search] unexpected failure query=%r", query)
        return error_response(500, str(e) or "Search failed")
    body = resolution.outcome.model_dump(mode="json", by_alias=True)
    if resolution.cached:
        body["cached"] = True
    return body


async def handle_ai(answers: OpenAIAnswerAdapter, body: Any) -> AiResponse | JSONResponse:
    """Send a prompt straight to the assistant. 400 on missing/blank prompt, 500 on provider failure."""
    prompt = prompt_from_body(body)
    if not prompt:
        return error_response(400, "prompt required")
    try:
        reply = await answers.reply(prompt)
    except SourceError as e:
        logger.exception("[api:ai] assistant failed")
        return error_response(500, e.message)
    except Exception as e:
        logger.exception("[api:ai] unexpected failure")
        return error_response(500, str(e) or "Assistant failed")
    return AiResponse(reply=reply)

