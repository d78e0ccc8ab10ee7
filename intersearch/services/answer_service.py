"""
Generative answers: OpenAI chat completions as the terminal search fallback and for /ai.

The search fallback passes web results (possibly none) as context messages so
answers stay grounded; /ai sends the prompt alone with the assistant persona.
"""

import logging
from typing import Any, Sequence

import openai
from openai import AsyncOpenAI

from intersearch.core.config import (
    ANSWER_MAX_TOKENS,
    ASSISTANT_MAX_TOKENS,
    LLM_API_TIMEOUT,
    OPENAI_API_KEY,
    OPENAI_LLM_MODEL,
    OPENAI_MAX_RETRIES,
    OPENAI_TEMPERATURE,
)
from intersearch.core.errors import (
    NotConfiguredError,
    UpstreamProtocolError,
    UpstreamUnavailableError,
)
from intersearch.schemas.search import GeneratedOutcome, SearchItem
from intersearch.services.base import SourceAdapter

logger = logging.getLogger(__name__)

ANSWER_SYSTEM_PROMPT = (
    'You are "I", an assistant that gives clear, factual answers using provided context when possible.'
)
ASSISTANT_SYSTEM_PROMPT = (
    'You are "I", an intelligent assistant similar to ChatGPT. Be accurate, clear, and safe.'
)


def build_answer_messages(query: str, context: Sequence[SearchItem]) -> list[dict[str, str]]:
    """System persona, one system message per context item, then the user query."""
    messages = [{"role": "system", "content": ANSWER_SYSTEM_PROMPT}]
    for c in context:
        messages.append({"role": "system", "content": f"Context: {c.title}\n{c.snippet}\n{c.link}"})
    messages.append({"role": "user", "content": query})
    return messages


class OpenAIAnswerAdapter(SourceAdapter):
    """Generative answer adapter. Pass `client` to reuse (or mock) the OpenAI client."""

    name = "openai"

    def __init__(
        self,
        api_key: str = OPENAI_API_KEY,
        model: str = OPENAI_LLM_MODEL,
        temperature: float = OPENAI_TEMPERATURE,
        answer_max_tokens: int = ANSWER_MAX_TOKENS,
        assistant_max_tokens: int = ASSISTANT_MAX_TOKENS,
        timeout: float = LLM_API_TIMEOUT,
        max_retries: int = OPENAI_MAX_RETRIES,
        client: AsyncOpenAI | None = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.answer_max_tokens = answer_max_tokens
        self.assistant_max_tokens = assistant_max_tokens
        self.timeout = timeout
        self.max_retries = max_retries
        self._client = client

    async def _create(self, client: AsyncOpenAI, messages: list[dict[str, Any]], max_tokens: int) -> Any:
        try:
            return await client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
                max_tokens=max_tokens,
            )
        except openai.APIStatusError as e:
            raise UpstreamUnavailableError(
                f"OpenAI error {e.status_code}: {e.message}",
                source=self.name,
                status_code=e.status_code,
            ) from e
        except openai.APIConnectionError as e:
            raise UpstreamUnavailableError(f"OpenAI request failed: {e}", source=self.name) from e
        except (openai.APIResponseValidationError, ValueError) as e:
            raise UpstreamProtocolError(f"OpenAI response could not be read: {e}", source=self.name) from e

    async def _complete(self, messages: list[dict[str, Any]], max_tokens: int) -> str:
        """Run one chat completion and return the stripped reply text."""
        if not self.api_key and self._client is None:
            raise NotConfiguredError("OPENAI_API_KEY not set.", source=self.name)
        logger.info("[answer_service:_complete] IN  messages=%d max_tokens=%d", len(messages), max_tokens)
        if self._client is not None:
            response = await self._create(self._client, messages, max_tokens)
        else:
            async with AsyncOpenAI(
                api_key=self.api_key, timeout=self.timeout, max_retries=self.max_retries
            ) as client:
                response = await self._create(client, messages, max_tokens)
        choices = getattr(response, "choices", None) or []
        if not choices:
            raise UpstreamProtocolError("OpenAI response has no choices", source=self.name)
        msg = getattr(choices[0], "message", None)
        out = (getattr(msg, "content", None) or "").strip()
        logger.info("[answer_service:_complete] OUT response_len=%d", len(out))
        return out

    async def resolve(self, query: str, prior_context: Sequence[SearchItem] = ()) -> GeneratedOutcome:
        logger.info("[answer_service:resolve] IN  query=%r context_items=%d", query, len(prior_context))
        text = await self._complete(build_answer_messages(query, prior_context), self.answer_max_tokens)
        return GeneratedOutcome(answer_text=text)

    async def reply(self, prompt: str) -> str:
        """Direct assistant reply for /ai: no search, no context."""
        messages = [
            {"role": "system", "content": ASSISTANT_SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ]
        return await self._complete(messages, self.assistant_max_tokens)
