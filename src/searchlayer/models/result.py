"""Result models returned to callers."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ResultEnvelope(BaseModel):
    """Uniform search result, independent of the engine reply shape.

    Each item in ``results`` is a stored document merged with its engine id.
    ``total`` is the engine's hit count; when the engine only reports a lower
    bound (``relation == "gte"``) that bound is returned as-is.
    """

    results: list[dict[str, Any]] = Field(default_factory=list, description="Matching documents in engine order")
    total: int = Field(default=0, ge=0, description="Total number of matching documents")


class EngineHealth(BaseModel):
    """Health status of the search engine cluster."""

    status: str = Field(description="Health status: healthy, degraded, unhealthy")
    latency_ms: int = Field(default=0, description="Latency of the health call in ms")
    last_check: str | None = Field(default=None, description="ISO timestamp of the check")
    message: str | None = Field(default=None, description="Additional health message")
