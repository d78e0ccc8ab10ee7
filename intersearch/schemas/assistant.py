"""Schemas for the /ai and /health endpoints."""

from pydantic import BaseModel, Field


class AiRequest(BaseModel):
    """Request body for POST /ai. Prompt is validated (non-empty after trim) by the handler."""

    prompt: str | int | float | None = Field(None, description="Prompt sent straight to the assistant, no search fallback. Numbers are read as text.")


class AiResponse(BaseModel):
    """Response for POST /ai."""

    assistant: str = Field("I", description="Assistant persona name.")
    reply: str = Field(..., description="Assistant reply text.")

    model_config = {
        "json_schema_extra": {
            "examples": [{"assistant": "I", "reply": "Paris is the capital of France."}]
        }
    }


class HealthResponse(BaseModel):
    """Response for GET /health (liveness only)."""

    status: str = "ok"
    ts: int = Field(..., description="Server time in epoch milliseconds.")
