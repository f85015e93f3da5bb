# tests/unit/pipeline/test_file_parser.py - v1
"""Tests for pipeline/file_parser.py: dispatch, AI fallback and error boundary."""

from __future__ import annotations

from typing import get_args
from unittest.mock import AsyncMock, patch

import pytest

from anyread.config.settings import CsvConfig, ImageConfig, LoggingConfig, PdfConfig
from anyread.core.errors import VisionRecognitionError
from anyread.core.models import AIFileType, FormatOptions
from anyread.pipeline.file_parser import AI_PROMPTS, PLACEHOLDER_LABELS, FileParser


class TestParseLocal:
    @pytest.mark.asyncio
    async def test_csv(self, quiet_settings, fake_fetcher):
        fake_fetcher.bodies["https://f.local/data.csv"] = b"id,name\n1,a\n2,b"
        parser = FileParser(quiet_settings, fetcher=fake_fetcher)
        result = await parser.parse("https://f.local/data.csv")
        assert result.success is True
        assert result.type == "csv"
        assert result.file_name == "data.csv"
        assert "| id | name |" in result.content
        assert result.metadata.size == len(b"id,name\n1,a\n2,b")
        assert result.metadata.row_count == 3
        assert result.metadata.truncated is False

    @pytest.mark.asyncio
    async def test_csv_raw_payload(self, make_settings, fake_fetcher):
        settings = make_settings(csv=CsvConfig(output_format="raw", max_rows=2))
        fake_fetcher.bodies["https://f.local/d.csv"] = b"h\n1\n2\n3"
        result = await FileParser(settings, fetcher=fake_fetcher).parse("https://f.local/d.csv")
        assert result.raw_data.sheets[0].total_rows == 4
        assert len(result.raw_data.sheets[0].rows) == 2

    @pytest.mark.asyncio
    async def test_json_metadata_copied(self, quiet_settings, fake_fetcher):
        fake_fetcher.bodies["https://f.local/c.json"] = b'{"a": 1}'
        result = await FileParser(quiet_settings, fetcher=fake_fetcher).parse("https://f.local/c.json")
        assert result.success is True
        dumped = result.metadata.model_dump(exclude_none=True)
        assert dumped["data_type"] == "object"
        assert dumped["keys"] == ["a"]

    @pytest.mark.asyncio
    async def test_yaml_with_date_keys(self, quiet_settings, fake_fetcher):
        fake_fetcher.bodies["https://f.local/changes.yaml"] = b"2024-01-01: first release\n"
        result = await FileParser(quiet_settings, fetcher=fake_fetcher).parse("https://f.local/changes.yaml")
        assert result.success is True
        assert '"2024-01-01": "first release"' in result.content

    @pytest.mark.asyncio
    async def test_decode_failure(self, quiet_settings, fake_fetcher):
        fake_fetcher.bodies["https://f.local/c.json"] = b"{broken"
        result = await FileParser(quiet_settings, fetcher=fake_fetcher).parse("https://f.local/c.json")
        assert result.success is False
        assert result.content == ""
        assert result.error.startswith("JSON parse failed")

    @pytest.mark.asyncio
    async def test_download_failure(self, quiet_settings, fake_fetcher):
        result = await FileParser(quiet_settings, fetcher=fake_fetcher).parse("https://f.local/gone.txt")
        assert result.success is False
        assert "HTTP 404" in result.error
        assert result.type == "text"


class TestParseUnsupported:
    @pytest.mark.asyncio
    async def test_unknown_extension(self, quiet_settings, fake_fetcher):
        result = await FileParser(quiet_settings, fetcher=fake_fetcher).parse("https://f.local/a.zip")
        assert result.success is False
        assert result.type == "unknown"
        assert result.content == ""
        assert result.error == "Unsupported file format: .zip (a.zip)"
        assert fake_fetcher.calls == []


class TestParseWithAI:
    @pytest.mark.asyncio
    async def test_image_without_ai_is_placeholder(self, quiet_settings, fake_fetcher):
        url = "https://f.local/photos/board.png"
        result = await FileParser(quiet_settings, fetcher=fake_fetcher).parse(url)
        assert result.success is True
        assert result.type == "image"
        assert url in result.content
        assert "board.png" in result.content
        assert result.metadata.mime_type == "image/png"
        assert fake_fetcher.calls == []

    @pytest.mark.asyncio
    async def test_image_with_ai(self, quiet_settings, fake_fetcher, mock_vision_provider):
        parser = FileParser(quiet_settings, fetcher=fake_fetcher, vision_provider=mock_vision_provider)
        result = await parser.parse("https://f.local/board.png")
        assert result.success is True
        assert result.content == "A red circuit board labelled ESP32-WROOM."
        assert result.metadata.model_dump()["token_usage"]["total_tokens"] == 150
        mock_vision_provider.analyze_image.assert_awaited_once_with(
            "https://f.local/board.png", prompt=AI_PROMPTS["image"], max_tokens=2000,
        )

    @pytest.mark.asyncio
    async def test_image_prompt_override(self, make_settings, fake_fetcher, mock_vision_provider):
        settings = make_settings(image=ImageConfig(prompt="Read the label", max_tokens=500))
        parser = FileParser(settings, fetcher=fake_fetcher, vision_provider=mock_vision_provider)
        await parser.parse("https://f.local/board.png")
        mock_vision_provider.analyze_image.assert_awaited_once_with(
            "https://f.local/board.png", prompt="Read the label", max_tokens=500,
        )

    @pytest.mark.asyncio
    async def test_audio_keeps_category_prompt(self, make_settings, fake_fetcher, mock_vision_provider):
        settings = make_settings(image=ImageConfig(prompt="Read the label"))
        parser = FileParser(settings, fetcher=fake_fetcher, vision_provider=mock_vision_provider)
        result = await parser.parse("https://f.local/memo.mp3")
        assert result.type == "audio"
        assert mock_vision_provider.analyze_image.await_args.kwargs["prompt"] == AI_PROMPTS["audio"]

    @pytest.mark.asyncio
    async def test_ai_failure_degrades_to_placeholder(self, quiet_settings, fake_fetcher, mock_vision_provider):
        mock_vision_provider.analyze_image.side_effect = VisionRecognitionError("openai", 3, RuntimeError("down"))
        parser = FileParser(quiet_settings, fetcher=fake_fetcher, vision_provider=mock_vision_provider)
        result = await parser.parse("https://f.local/clip.mp4")
        assert result.success is True
        assert "https://f.local/clip.mp4" in result.content
        assert result.error is None

    @pytest.mark.asyncio
    async def test_ai_disabled_for_images(self, make_settings, fake_fetcher, mock_vision_provider):
        settings = make_settings(image=ImageConfig(enable_ai=False))
        parser = FileParser(settings, fetcher=fake_fetcher, vision_provider=mock_vision_provider)
        result = await parser.parse("https://f.local/board.png")
        assert "https://f.local/board.png" in result.content
        mock_vision_provider.analyze_image.assert_not_awaited()


class TestParsePdf:
    @pytest.mark.asyncio
    async def test_decode_failure_falls_back_to_ai(self, quiet_settings, fake_fetcher, mock_vision_provider):
        fake_fetcher.bodies["https://f.local/scan.pdf"] = b"not really a pdf"
        parser = FileParser(quiet_settings, fetcher=fake_fetcher, vision_provider=mock_vision_provider)
        with patch("anyread.extraction.pdf_extractor.PdfExtractor.extract",
                   new=AsyncMock(side_effect=RuntimeError("broken xref"))):
            result = await parser.parse("https://f.local/scan.pdf")
        assert result.success is True
        assert result.type == "pdf"
        assert result.content == "A red circuit board labelled ESP32-WROOM."
        kwargs = mock_vision_provider.analyze_image.await_args.kwargs
        assert kwargs == {"prompt": AI_PROMPTS["pdf"], "max_tokens": 4000}

    @pytest.mark.asyncio
    async def test_decode_failure_without_ai(self, make_settings, fake_fetcher):
        settings = make_settings(pdf=PdfConfig(enable_ai=True))
        fake_fetcher.bodies["https://f.local/scan.pdf"] = b"%PDF"
        parser = FileParser(settings, fetcher=fake_fetcher)
        with patch("anyread.extraction.pdf_extractor.PdfExtractor.extract",
                   new=AsyncMock(side_effect=RuntimeError("broken xref"))):
            result = await parser.parse("https://f.local/scan.pdf")
        assert result.success is True
        assert "PDF document" in result.content
        assert "https://f.local/scan.pdf" in result.content

    @pytest.mark.asyncio
    async def test_download_failure_is_not_ai_fallback(self, quiet_settings, fake_fetcher, mock_vision_provider):
        parser = FileParser(quiet_settings, fetcher=fake_fetcher, vision_provider=mock_vision_provider)
        result = await parser.parse("https://f.local/missing.pdf")
        assert result.success is False
        mock_vision_provider.analyze_image.assert_not_awaited()


class TestErrorBoundary:
    @pytest.mark.asyncio
    async def test_unexpected_exception_becomes_record(self, quiet_settings, fake_fetcher):
        fake_fetcher.bodies["https://f.local/a.md"] = b"# hi"
        parser = FileParser(quiet_settings, fetcher=fake_fetcher)
        with patch("anyread.extraction.md_extractor.MdExtractor.extract",
                   new=AsyncMock(side_effect=KeyError("boom"))):
            result = await parser.parse("https://f.local/a.md")
        assert result.success is False
        assert "boom" in result.error


class TestLoggingSink:
    @pytest.mark.asyncio
    async def test_sink_receives_messages(self, make_settings, fake_fetcher):
        calls: list[tuple[str, str]] = []
        settings = make_settings(logging=LoggingConfig(level="info", sink=lambda lvl, msg: calls.append((lvl, msg))))
        await FileParser(settings, fetcher=fake_fetcher).parse("https://f.local/a.zip")
        levels = [lvl for lvl, _ in calls]
        assert "info" in levels
        assert "warn" in levels


class TestHelpersAndResources:
    def test_static_helpers(self, quiet_settings):
        parser = FileParser(quiet_settings)
        assert parser.detect_file_type("a.yml") == "yaml"
        assert parser.extract_file_name("https://x/a%20b.md?x") == "a b.md"
        assert any(f.extension == ".csv" for f in parser.supported_formats())
        assert parser.has_ai is False

    def test_format_kwargs(self, quiet_settings):
        parser = FileParser(quiet_settings)
        assert parser.format([], FormatOptions()) == ""
        assert parser.format([], separator="===") == ""

    @pytest.mark.asyncio
    async def test_context_manager_closes_provider(self, quiet_settings, mock_vision_provider):
        async with FileParser(quiet_settings, vision_provider=mock_vision_provider) as parser:
            assert parser.has_ai is True
        mock_vision_provider.aclose.assert_awaited_once()

    def test_ai_tables_cover_ai_file_types(self):
        ai_types = set(get_args(AIFileType))
        assert set(AI_PROMPTS) == ai_types
        assert set(PLACEHOLDER_LABELS) == ai_types
