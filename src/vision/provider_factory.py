# src/vision/provider_factory.py - v2
"""Factory: instantiate a vision provider from the configured provider tag.

"custom" is not a distinct implementation: it is the OpenAI-compatible
adapter pointed at a user-supplied base_url and model.
"""

from __future__ import annotations

import importlib
import logging

import httpx

from anyread.config.settings import AIConfig
from anyread.vision.base_provider import BaseVisionProvider

logger = logging.getLogger(__name__)

# Registry of provider tag -> adapter class path (lazy import).
_PROVIDER_REGISTRY: dict[str, str] = {
    "openai": "anyread.vision.adapters.openai_adapter.OpenAIVisionAdapter",
    "custom": "anyread.vision.adapters.openai_adapter.OpenAIVisionAdapter",
    "gemini": "anyread.vision.adapters.gemini_adapter.GeminiVisionAdapter",
    "anthropic": "anyread.vision.adapters.anthropic_adapter.AnthropicVisionAdapter",
}


class UnsupportedProviderError(ValueError):
    """Raised when a provider is not registered."""


def create_vision_provider(
    config: AIConfig,
    http_client: httpx.AsyncClient | None = None,
) -> BaseVisionProvider:
    """Instantiate the adapter for config.provider.

    Args:
        config: AI provider block from ParserSettings.
        http_client: Optional client used to fetch inline images.

    Raises:
        UnsupportedProviderError: If the provider is not registered.
    """
    class_path = _PROVIDER_REGISTRY.get(config.provider)
    if class_path is None:
        raise UnsupportedProviderError(
            f"Unsupported vision provider: {config.provider!r}. "
            f"Available: {', '.join(sorted(_PROVIDER_REGISTRY))}"
        )

    adapter_cls = _import_class(class_path)
    provider = adapter_cls(config, http_client=http_client)
    logger.debug("Created vision provider: provider=%s, model=%s", config.provider, provider.vision_model)
    return provider


def _import_class(class_path: str) -> type:
    """Dynamically import a class from its fully qualified path."""
    module_path, class_name = class_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return getattr(module, class_name)
