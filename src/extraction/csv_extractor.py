# src/extraction/csv_extractor.py - v1
"""CSV extractor."""

from __future__ import annotations

from anyread.config.settings import CsvConfig
from anyread.core.models import ExtractionResult, FileType
from anyread.extraction.base_extractor import BaseExtractor
from anyread.extraction.tabular import parse_csv


class CsvExtractor(BaseExtractor):
    """Extractor for delimited text files (.csv)."""

    def __init__(self, config: CsvConfig | None = None) -> None:
        self._config = config or CsvConfig()

    @property
    def file_type(self) -> FileType:
        return "csv"

    async def extract(self, data: bytes, file_name: str) -> ExtractionResult:
        result = parse_csv(
            data,
            file_name,
            delimiter=self._config.delimiter,
            max_rows=self._config.max_rows,
            output_format=self._config.output_format,
        )
        return ExtractionResult(
            content=result.content,
            metadata=result.metadata(),
            raw_data=result.raw_data,
        )
