"""
Integration tests for the HTTP endpoints.

The app is built with scripted sources so tests do not require Google or OpenAI.
"""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from conftest import FakeSource
from intersearch.core.errors import NotConfiguredError, UpstreamUnavailableError
from intersearch.core.result_cache import ResultCache
from intersearch.main import create_app
from intersearch.schemas.search import (
    GeneratedOutcome,
    PrimaryOutcome,
    SearchItem,
    SourceTag,
    WebOutcome,
)
from intersearch.services.answer_service import OpenAIAnswerAdapter
from intersearch.services.fallback import FallbackResolver

PARIS = SearchItem(
    title="Paris",
    snippet="Paris is the capital...",
    link="https://en.wikipedia.org/wiki/Paris",
    source_tag=SourceTag.WEB,
)


def _client(
    web: FakeSource | None = None,
    generative: FakeSource | None = None,
    answers: OpenAIAnswerAdapter | None = None,
) -> TestClient:
    resolver = FallbackResolver(
        cache=ResultCache(),
        primary=FakeSource("primary", outcome=PrimaryOutcome()),
        web=web or FakeSource("google", outcome=WebOutcome()),
        generative=generative or FakeSource("openai", outcome=GeneratedOutcome(answer_text="generated")),
    )
    return TestClient(create_app(resolver=resolver, answer_adapter=answers or OpenAIAnswerAdapter(api_key="")))


# --- /search ---

def test_search_web_hit_then_cached() -> None:
    """First call returns {source, results}; the repeat adds cached=true and skips the sources."""
    web = FakeSource("google", outcome=WebOutcome(items=(PARIS,)))
    client = _client(web=web)

    first = client.get("/search", params={"q": "capital of France"})
    second = client.get("/search", params={"q": "capital of France"})

    assert first.status_code == 200
    assert first.json() == {
        "source": "google",
        "results": [
            {
                "title": "Paris",
                "snippet": "Paris is the capital...",
                "link": "https://en.wikipedia.org/wiki/Paris",
                "source": "web",
            }
        ],
    }
    assert second.status_code == 200
    assert second.json() == {**first.json(), "cached": True}
    assert len(web.calls) == 1


def test_search_generated_answer_shape() -> None:
    gen = FakeSource("openai", outcome=GeneratedOutcome(answer_text="I don't have information on that."))
    response = _client(generative=gen).get("/search", params={"q": "xyz123nonsense"})
    assert response.status_code == 200
    assert response.json() == {"source": "openai", "answer": "I don't have information on that."}


def test_search_absorbs_web_failure() -> None:
    web = FakeSource("google", error=NotConfiguredError("Google API key or CX not configured."))
    response = _client(web=web).get("/search", params={"q": "capital of France"})
    assert response.status_code == 200
    assert response.json() == {"source": "openai", "answer": "generated"}


@pytest.mark.parametrize("params", [{}, {"q": ""}, {"q": "   "}])
def test_search_missing_query_returns_400(params: dict) -> None:
    web = FakeSource("google", outcome=WebOutcome())
    response = _client(web=web).get("/search", params=params)
    assert response.status_code == 400
    assert response.json() == {"error": "Missing ?q="}
    assert web.calls == []


def test_search_all_sources_exhausted_returns_500() -> None:
    gen = FakeSource("openai", error=UpstreamUnavailableError("OpenAI error 500: server error"))
    response = _client(generative=gen).get("/search", params={"q": "anything"})
    assert response.status_code == 500
    assert response.json() == {"error": "OpenAI error 500: server error"}


# --- /ai ---

def test_ai_returns_reply() -> None:
    answers = OpenAIAnswerAdapter(api_key="test-key")
    answers.reply = AsyncMock(return_value="Hello from I.")
    response = _client(answers=answers).post("/ai", json={"prompt": "  say hello  "})
    assert response.status_code == 200
    assert response.json() == {"assistant": "I", "reply": "Hello from I."}
    answers.reply.assert_awaited_once_with("say hello")


@pytest.mark.parametrize("body", [None, {}, {"prompt": ""}, {"prompt": "   "}])
def test_ai_missing_prompt_returns_400(body) -> None:
    response = _client().post("/ai", json=body)
    assert response.status_code == 400
    assert response.json() == {"error": "prompt required"}


def test_ai_unconfigured_returns_500() -> None:
    response = _client(answers=OpenAIAnswerAdapter(api_key="")).post("/ai", json={"prompt": "hi"})
    assert response.status_code == 500
    assert response.json() == {"error": "OPENAI_API_KEY not set."}


@pytest.mark.parametrize("body", [["x"], "plain", 42, {"prompt": ["a", "list"]}, {"prompt": {"nested": 1}}])
def test_ai_non_object_or_bad_prompt_returns_400(body) -> None:
    """Bodies that are not {"prompt": text} get a 400 {error}, never FastAPI's 422 {detail}."""
    answers = OpenAIAnswerAdapter(api_key="test-key")
    answers.reply = AsyncMock(return_value="unused")
    response = _client(answers=answers).post("/ai", json=body)
    assert response.status_code == 400
    assert response.json() == {"error": "prompt required"}
    answers.reply.assert_not_awaited()


def test_ai_invalid_json_returns_400() -> None:
    response = _client().post("/ai", content=b"{bad json", headers={"Content-Type": "application/json"})
    assert response.status_code == 400
    assert response.json() == {"error": "prompt required"}


def test_ai_numeric_prompt_is_read_as_text() -> None:
    answers = OpenAIAnswerAdapter(api_key="test-key")
    answers.reply = AsyncMock(return_value="Forty-two.")
    response = _client(answers=answers).post("/ai", json={"prompt": 42})
    assert response.status_code == 200
    assert response.json() == {"assistant": "I", "reply": "Forty-two."}
    answers.reply.assert_awaited_once_with("42")


def test_ai_unexpected_error_returns_500_error_body() -> None:
    answers = OpenAIAnswerAdapter(api_key="test-key")
    answers.reply = AsyncMock(side_effect=RuntimeError("client closed"))
    response = _client(answers=answers).post("/ai", json={"prompt": "hi"})
    assert response.status_code == 500
    assert response.json() == {"error": "client closed"}


def test_search_unexpected_error_returns_500_error_body() -> None:
    """Failures outside the source error types still come back as {error}."""
    gen = FakeSource("openai", error=RuntimeError("resolver crashed"))
    response = _client(generative=gen).get("/search", params={"q": "anything"})
    assert response.status_code == 500
    assert response.json() == {"error": "resolver crashed"}


# --- wiring ---

def test_ai_shares_resolver_generative_adapter_by_default() -> None:
    """create_app(resolver=...) without answer_adapter uses the resolver's generative source for /ai."""
    answers = OpenAIAnswerAdapter(api_key="test-key")
    answers.reply = AsyncMock(return_value="shared")
    resolver = FallbackResolver(
        cache=ResultCache(),
        primary=FakeSource("primary", outcome=PrimaryOutcome()),
        web=FakeSource("google", outcome=WebOutcome()),
        generative=answers,
    )
    app = create_app(resolver=resolver)

    assert app.state.answer_adapter is answers
    response = TestClient(app).post("/ai", json={"prompt": "hi"})
    assert response.json() == {"assistant": "I", "reply": "shared"}


# --- system ---

def test_health() -> None:
    response = _client().get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert isinstance(data["ts"], int) and data["ts"] > 0


def test_cache_stats_and_clear() -> None:
    client = _client()
    client.get("/search", params={"q": "one"})
    client.get("/search", params={"q": "one"})

    stats = client.get("/cache/stats").json()
    assert stats["size"] == 1
    assert stats["hits"] == 1
    assert stats["max_entries"] == 500

    cleared = client.delete("/cache")
    assert cleared.json() == {"cleared": 1}
    assert client.get("/cache/stats").json()["size"] == 0
