# src/vision/adapters/openai_adapter.py - v2
"""OpenAI-compatible vision adapter.

Uses the official openai SDK (chat completions with an image_url part).
Also serves the "custom" provider, which is an OpenAI-compatible endpoint
reached through base_url.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from anyread.vision.base_provider import USER_INSTRUCTION, BaseVisionProvider, InlineImage
from anyread.vision.models import TokenUsage, VisionRequest, VisionResponse

DEFAULT_BASE_URL = "https://api.openai.com/v1"

# Characters left untouched when passing the image URL by reference.
_URI_SAFE = ";,/?:@&=+$-_.!~*'()#%"


def encode_image_url(url: str) -> str:
    """Percent-encode characters that are not valid in a URI."""
    return quote(url, safe=_URI_SAFE)


class OpenAIVisionAdapter(BaseVisionProvider):
    """OpenAI GPT vision adapter."""

    @property
    def provider_name(self) -> str:
        return self._config.provider

    @property
    def default_model(self) -> str:
        return "gpt-4o"

    def _create_client(self) -> Any:
        try:
            import openai
        except ImportError as e:
            raise ImportError("openai package required: pip install openai") from e
        return openai.AsyncOpenAI(
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
        messages: list[dict[str, Any]] = [
            {"role": "system", "content": prompt},
            {
                "role": "user",
                "content": [
                    {"type": "image_url", "image_url": {"url": encode_image_url(request.image_url)}},
                    {"type": "text", "text": USER_INSTRUCTION},
                ],
            },
        ]
        resp = await self._client.chat.completions.create(
            model=self.vision_model, messages=messages, max_tokens=max_tokens,
        )

        content = ""
        if resp.choices:
            content = resp.choices[0].message.content or ""
        usage = resp.usage
        return VisionResponse(
            content=content,
            usage=TokenUsage(
                prompt_tokens=usage.prompt_tokens or 0,
                completion_tokens=usage.completion_tokens or 0,
                total_tokens=usage.total_tokens or 0,
            ) if usage else None,
            model=self.vision_model,
            provider=self.provider_name,
        )
