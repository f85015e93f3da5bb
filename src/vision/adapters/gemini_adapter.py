# src/vision/adapters/gemini_adapter.py - v2
"""Google Gemini vision adapter.

Uses the google-genai SDK (generateContent with an inline_data part).
"""

from __future__ import annotations

from typing import Any

from anyread.vision.base_provider import USER_INSTRUCTION, BaseVisionProvider, InlineImage
from anyread.vision.models import TokenUsage, VisionRequest, VisionResponse

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"
API_VERSION = "v1beta"


def normalize_base_url(base_url: str | None) -> str:
    """Drop trailing slashes and a trailing /v1beta; the SDK appends the version."""
    url = (base_url or DEFAULT_BASE_URL).rstrip("/")
    if url.endswith("/" + API_VERSION):
        url = url[: -len(API_VERSION) - 1]
    return url


class GeminiVisionAdapter(BaseVisionProvider):
    """Google Gemini adapter."""

    inline_image = True

    @property
    def provider_name(self) -> str:
        return "gemini"

    @property
    def default_model(self) -> str:
        return "gemini-2.0-flash"

    def _create_client(self) -> Any:
        try:
            from google import genai
        except ImportError as e:
            raise ImportError("google-genai package required: pip install google-genai") from e
        http_options: dict[str, Any] = {
            "base_url": normalize_base_url(self._config.base_url),
            "api_version": API_VERSION,
            "timeout": int(self._config.timeout_s * 1000),
        }
        if self._config.headers:
            http_options["headers"] = dict(self._config.headers)
        return genai.Client(api_key=self._config.api_key or "", http_options=http_options)

    async def _send(
        self,
        request: VisionRequest,
        prompt: str,
        max_tokens: int,
        image: InlineImage | None,
    ) -> VisionResponse:
        image = self._require_image(image)
        contents = [
            {
                "role": "user",
                "parts": [
                    {"text": f"{prompt}\n\n{USER_INSTRUCTION}"},
                    {"inline_data": {"mime_type": image.media_type, "data": image.data}},
                ],
            }
        ]
        resp = await self._client.aio.models.generate_content(
            model=self.vision_model,
            contents=contents,
            config={"max_output_tokens": max_tokens},
        )

        usage = getattr(resp, "usage_metadata", None)
        return VisionResponse(
            content=self._extract_text(resp),
            usage=TokenUsage(
                prompt_tokens=getattr(usage, "prompt_token_count", 0) or 0,
                completion_tokens=getattr(usage, "candidates_token_count", 0) or 0,
                total_tokens=getattr(usage, "total_token_count", 0) or 0,
            ) if usage else None,
            model=self.vision_model,
            provider="gemini",
        )

    @staticmethod
    def _extract_text(resp: Any) -> str:
        """Join the text parts of the first candidate."""
        candidates = getattr(resp, "candidates", None) or []
        if not candidates:
            return ""
        content = getattr(candidates[0], "content", None)
        parts = getattr(content, "parts", None) or []
        return "".join(p.text for p in parts if getattr(p, "text", None))
