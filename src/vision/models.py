# src/vision/models.py - v1
"""Vision-specific types: VisionRequest, VisionResponse, TokenUsage."""

from __future__ import annotations

from pydantic import BaseModel


class VisionRequest(BaseModel):
    """A single image-analysis call."""

    image_url: str
    prompt: str | None = None
    max_tokens: int | None = None


class TokenUsage(BaseModel):
    """Token counts normalized across vendors."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class VisionResponse(BaseModel):
    """Normalized response from any vision provider."""

    content: str
    usage: TokenUsage | None = None
    model: str | None = None
    provider: str | None = None
