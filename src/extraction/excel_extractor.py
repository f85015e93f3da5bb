# src/extraction/excel_extractor.py - v1
"""Excel extractor (.xlsx via openpyxl, legacy .xls via xlrd)."""

from __future__ import annotations

from anyread.config.settings import ExcelConfig
from anyread.core.models import ExtractionResult, FileType
from anyread.extraction.base_extractor import BaseExtractor
from anyread.extraction.tabular import parse_excel


class ExcelExtractor(BaseExtractor):
    """Extractor for Excel workbooks."""

    def __init__(self, config: ExcelConfig | None = None) -> None:
        self._config = config or ExcelConfig()

    @property
    def file_type(self) -> FileType:
        return "excel"

    async def extract(self, data: bytes, file_name: str) -> ExtractionResult:
        result = parse_excel(
            data,
            file_name,
            max_rows=self._config.max_rows,
            all_sheets=self._config.all_sheets,
            output_format=self._config.output_format,
        )
        return ExtractionResult(
            content=result.content,
            metadata=result.metadata(),
            raw_data=result.raw_data,
        )
