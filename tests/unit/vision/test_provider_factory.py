# tests/unit/vision/test_provider_factory.py - v2
"""Tests for vision/provider_factory.py."""

from __future__ import annotations

import pytest

from anyread.config.settings import AIConfig
from anyread.vision.adapters.anthropic_adapter import AnthropicVisionAdapter
from anyread.vision.adapters.gemini_adapter import GeminiVisionAdapter
from anyread.vision.adapters.openai_adapter import OpenAIVisionAdapter
from anyread.vision.provider_factory import UnsupportedProviderError, create_vision_provider


class TestCreateVisionProvider:
    @pytest.mark.parametrize("provider,cls", [
        ("openai", OpenAIVisionAdapter),
        ("gemini", GeminiVisionAdapter),
        ("anthropic", AnthropicVisionAdapter),
    ])
    def test_vendors(self, provider, cls):
        assert isinstance(create_vision_provider(AIConfig(provider=provider)), cls)

    def test_custom_uses_openai_shape(self):
        cfg = AIConfig(provider="custom", base_url="http://llm.local/v1", model="m")
        assert isinstance(create_vision_provider(cfg), OpenAIVisionAdapter)

    def test_unknown(self):
        cfg = AIConfig.model_construct(provider="ollama")
        with pytest.raises(UnsupportedProviderError, match="ollama"):
            create_vision_provider(cfg)
