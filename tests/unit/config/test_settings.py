# tests/unit/config/test_settings.py - v2
"""Tests for config/settings.py."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from anyread.config.settings import AIConfig, CsvConfig, ParserSettings, load_settings
from anyread.core.errors import ConfigurationError


class TestDefaults:
    def test_defaults(self, monkeypatch):
        for key in ("ANYREAD_AI__PROVIDER", "ANYREAD_EXCEL__MAX_ROWS"):
            monkeypatch.delenv(key, raising=False)
        s = ParserSettings(_env_file=None)
        assert s.ai is None
        assert s.download.timeout_s == 60.0
        assert s.download.max_size_bytes == 50 * 1024 * 1024
        assert s.excel.max_rows == -1
        assert s.excel.all_sheets is True
        assert s.excel.output_format == "markdown"
        assert s.csv.delimiter == ","
        assert s.image.max_tokens == 2000
        assert s.pdf.max_tokens == 4000
        assert s.logging.level == "info"


class TestEnvironment:
    def test_nested_env(self, monkeypatch):
        monkeypatch.setenv("ANYREAD_EXCEL__MAX_ROWS", "100")
        monkeypatch.setenv("ANYREAD_AI__PROVIDER", "gemini")
        monkeypatch.setenv("ANYREAD_AI__API_KEY", "k")
        s = ParserSettings(_env_file=None)
        assert s.excel.max_rows == 100
        assert s.ai is not None
        assert s.ai.provider == "gemini"
        assert s.ai.api_key == "k"

    def test_override_wins(self, monkeypatch):
        monkeypatch.setenv("ANYREAD_CSV__DELIMITER", ";")
        s = load_settings(csv=CsvConfig(delimiter="\t"))
        assert s.csv.delimiter == "\t"


class TestAIConfig:
    def test_custom_requires_base_url_and_model(self):
        with pytest.raises(ConfigurationError):
            AIConfig(provider="custom", api_key="k", model="m")
        with pytest.raises(ConfigurationError):
            AIConfig(provider="custom", api_key="k", base_url="http://llm.local/v1")

    def test_custom_ok(self):
        cfg = AIConfig(provider="custom", base_url="http://llm.local/v1", model="qwen-vl")
        assert cfg.max_retries == 3
        assert cfg.timeout_s == 60.0

    def test_unknown_provider(self):
        with pytest.raises(ValidationError):
            AIConfig(provider="ollama")

    def test_max_retries_positive(self):
        with pytest.raises(ValidationError):
            AIConfig(provider="openai", max_retries=0)


class TestCsvConfig:
    @pytest.mark.parametrize("bad", ["", ",,", '"'])
    def test_invalid_delimiter(self, bad):
        with pytest.raises(ValidationError):
            CsvConfig(delimiter=bad)


class TestLoggingSink:
    def test_sink_not_serialized(self):
        s = ParserSettings(logging={"sink": lambda level, msg: None})
        assert s.logging.sink is not None
        assert "sink" not in s.model_dump()["logging"]
