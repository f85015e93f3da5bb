# src/vision/adapters/anthropic_adapter.py - v2
"""Anthropic Claude vision adapter.

Uses the official anthropic SDK (messages API). The image is sent inline as a
base64 block, so it is fetched once before the retry loop.
"""

from __future__ import annotations

import base64
from typing import Any

from anyread.vision.base_provider import USER_INSTRUCTION, BaseVisionProvider, InlineImage
from anyread.vision.models import TokenUsage, VisionRequest, VisionResponse

DEFAULT_BASE_URL = "https://api.anthropic.com"


class AnthropicVisionAdapter(BaseVisionProvider):
    """Adapter for Anthropic Claude models."""

    inline_image = True

    @property
    def provider_name(self) -> str:
        return "anthropic"

    @property
    def default_model(self) -> str:
        return "claude-3-5-sonnet-20241022"

    def _create_client(self) -> Any:
        try:
            import anthropic
        except ImportError as e:
            raise ImportError(
                "anthropic package required: pip install anthropic"
            ) from e
        return anthropic.AsyncAnthropic(
            api_key=self._config.api_key or "",
            base_url=self._config.base_url or DEFAULT_BASE_URL,
            timeout=self._config.timeout_s,
            max_retries=0,
            default_headers=self._config.headers or None,
        )

    async def _send(
        self,
        request: VisionRequest,
        prompt: str,
        max_tokens: int,
        image: InlineImage | None,
    ) -> VisionResponse:
        image = self._require_image(image)
        content_blocks: list[dict[str, Any]] = [
            {
                "type": "image",
                "source": {
                    "type": "base64",
                    "media_type": image.media_type,
                    "data": base64.b64encode(image.data).decode("ascii"),
                },
            },
            {"type": "text", "text": USER_INSTRUCTION},
        ]
        response = await self._client.messages.create(
            model=self.vision_model,
            max_tokens=max_tokens,
            system=prompt,
            messages=[{"role": "user", "content": content_blocks}],
        )

        usage = getattr(response, "usage", None)
        token_usage = None
        if usage is not None:
            input_tokens = usage.input_tokens or 0
            output_tokens = usage.output_tokens or 0
            token_usage = TokenUsage(
                prompt_tokens=input_tokens,
                completion_tokens=output_tokens,
                total_tokens=input_tokens + output_tokens,
            )
        return VisionResponse(
            content=self._extract_content(response),
            usage=token_usage,
            model=self.vision_model,
            provider="anthropic",
        )

    @staticmethod
    def _extract_content(response: Any) -> str:
        """Concatenate the text blocks of a messages response."""
        return "".join(
            block.text for block in response.content or []
            if getattr(block, "type", None) == "text" and block.text
        )
