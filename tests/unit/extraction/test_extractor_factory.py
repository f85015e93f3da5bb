# tests/unit/extraction/test_extractor_factory.py - v2
"""Tests for extraction/extractor_factory.py."""

from __future__ import annotations

import pytest

from anyread.config.settings import CsvConfig, ParserSettings
from anyread.core.errors import UnsupportedFormatError
from anyread.extraction.csv_extractor import CsvExtractor
from anyread.extraction.excel_extractor import ExcelExtractor
from anyread.extraction.extractor_factory import create_extractor, local_file_types
from anyread.extraction.pdf_extractor import PdfExtractor


class TestCreateExtractor:
    def test_known_types(self):
        assert isinstance(create_extractor("pdf"), PdfExtractor)
        assert isinstance(create_extractor("excel"), ExcelExtractor)

    def test_unknown_type(self):
        with pytest.raises(UnsupportedFormatError):
            create_extractor("image")

    @pytest.mark.asyncio
    async def test_csv_gets_settings(self):
        settings = ParserSettings(csv=CsvConfig(delimiter=";", output_format="json"))
        extractor = create_extractor("csv", settings)
        assert isinstance(extractor, CsvExtractor)
        result = await extractor.extract(b"a;b\n1;2", "x.csv")
        assert '"a": "1"' in result.content

    def test_local_file_types(self):
        types = local_file_types()
        assert "csv" in types
        assert "markdown" in types
        assert "image" not in types
