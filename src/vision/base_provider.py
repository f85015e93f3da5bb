# src/vision/base_provider.py - v1
"""Abstract vision provider interface.

Every vendor adapter exposes a single capability, analyze_image(), which
accepts an image reference plus an optional prompt and token budget and
returns the text the model produced. Retrying and empty-response handling
live here so that each adapter only implements one request/response cycle.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import httpx

from anyread.config.settings import DEFAULT_USER_AGENT, AIConfig
from anyread.core.errors import EmptyResponseError, VisionRecognitionError
from anyread.vision.models import VisionRequest, VisionResponse
from anyread.vision.retry import with_retry

logger = logging.getLogger(__name__)

DEFAULT_PROMPT = """You are a professional image analysis assistant. Analyze the image in detail, covering:
1. A description of the main content of the image
2. For product photos, the product model, brand and specifications
3. For document or table screenshots, the extracted text
4. For electronic components, the part number and parameters
5. Any other important details

Answer as thoroughly and accurately as possible."""

USER_INSTRUCTION = "Please analyze the content of this image."

DEFAULT_MAX_TOKENS = 2000
IMAGE_FETCH_TIMEOUT_S = 30.0
DEFAULT_IMAGE_MIME = "image/jpeg"


@dataclass(frozen=True)
class InlineImage:
    """Image bytes fetched for vendors that require inline data."""

    data: bytes
    media_type: str


def parse_media_type(content_type: str | None) -> str:
    """Strip parameters from a Content-Type header, defaulting to JPEG."""
    if not content_type:
        return DEFAULT_IMAGE_MIME
    media_type = content_type.split(";", 1)[0].strip()
    return media_type or DEFAULT_IMAGE_MIME


class BaseVisionProvider(ABC):
    """Unified interface for all vision providers."""

    #: Whether the vendor needs the image bytes inline instead of by URL.
    inline_image: bool = False

    def __init__(self, config: AIConfig, http_client: httpx.AsyncClient | None = None) -> None:
        self._config = config
        self._http_client = http_client
        self.__client: Any = None  # Lazy SDK client

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (openai, gemini, anthropic)."""

    @property
    @abstractmethod
    def default_model(self) -> str:
        """Vendor default model."""

    @property
    def default_vision_model(self) -> str:
        return self.default_model

    @property
    def vision_model(self) -> str:
        """Model used for vision calls: vision_model, then model, then vendor default."""
        return self._config.vision_model or self._config.model or self.default_vision_model

    @property
    def _client(self) -> Any:
        """Lazy-init vendor SDK client (only on first API call)."""
        if self.__client is None:
            self.__client = self._create_client()
        return self.__client

    @abstractmethod
    def _create_client(self) -> Any:
        """Build the vendor SDK client with SDK-level retries disabled."""

    @abstractmethod
    async def _send(
        self,
        request: VisionRequest,
        prompt: str,
        max_tokens: int,
        image: InlineImage | None,
    ) -> VisionResponse:
        """Perform one request/response cycle. May return empty content."""

    async def analyze_image(
        self,
        image_url: str,
        prompt: str | None = None,
        max_tokens: int | None = None,
    ) -> VisionResponse:
        """Analyze an image and return the extracted text.

        Args:
            image_url: Publicly reachable image URL.
            prompt: Instruction for the model; DEFAULT_PROMPT when omitted.
            max_tokens: Output token budget; 2000 when omitted.

        Returns:
            VisionResponse with non-empty content.

        Raises:
            VisionRecognitionError: If the image cannot be fetched or every
                attempt failed.
        """
        request = VisionRequest(image_url=image_url, prompt=prompt, max_tokens=max_tokens)
        image = await self._fetch_image(image_url) if self.inline_image else None
        return await with_retry(
            self._attempt,
            request,
            request.prompt or DEFAULT_PROMPT,
            request.max_tokens or DEFAULT_MAX_TOKENS,
            image,
            provider=self.provider_name,
            max_retries=self._config.max_retries,
        )

    async def _attempt(
        self,
        request: VisionRequest,
        prompt: str,
        max_tokens: int,
        image: InlineImage | None,
    ) -> VisionResponse:
        response = await self._send(request, prompt, max_tokens, image)
        if not response.content:
            raise EmptyResponseError(f"{self.provider_name} returned empty content")
        return response

    async def _fetch_image(self, url: str) -> InlineImage:
        """Download image bytes for inline embedding.

        Raises:
            VisionRecognitionError: On network error or non-2xx status.
        """
        headers = {"User-Agent": DEFAULT_USER_AGENT}
        try:
            if self._http_client is not None:
                resp = await self._http_client.get(
                    url, headers=headers, timeout=IMAGE_FETCH_TIMEOUT_S, follow_redirects=True,
                )
            else:
                async with httpx.AsyncClient(
                    timeout=IMAGE_FETCH_TIMEOUT_S, follow_redirects=True,
                ) as client:
                    resp = await client.get(url, headers=headers)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Image fetch failed for %s: %s", url, e)
            raise VisionRecognitionError(self.provider_name, 0, e) from e

        return InlineImage(data=resp.content, media_type=parse_media_type(resp.headers.get("content-type")))

    def _require_image(self, image: InlineImage | None) -> InlineImage:
        """Return the pre-fetched image for inline-image adapters."""
        if image is None:
            raise VisionRecognitionError(
                self.provider_name, 0, ValueError("inline image data is missing"),
            )
        return image

    async def aclose(self) -> None:
        """Close the SDK client if one was created."""
        if self.__client is not None:
            close = getattr(self.__client, "close", None)
            if close is not None:
                result = close()
                if hasattr(result, "__await__"):
                    await result
            self.__client = None
