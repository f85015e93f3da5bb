# src/extraction/txt_extractor.py - v3
"""Plain text extractor: BOM-aware decode with a length cap."""

from __future__ import annotations

from anyread.core.models import ExtractionResult, FileType
from anyread.extraction.base_extractor import BaseExtractor

DEFAULT_MAX_CHARS = 100_000


class TxtExtractor(BaseExtractor):
    """Extractor for plain text files (.txt, .rtf)."""

    def __init__(self, max_chars: int = DEFAULT_MAX_CHARS) -> None:
        self._max_chars = max_chars

    @property
    def file_type(self) -> FileType:
        return "text"

    async def extract(self, data: bytes, file_name: str) -> ExtractionResult:
        text, encoding = self._decode_with_bom(data)

        truncated = False
        if self._max_chars > 0 and len(text) > self._max_chars:
            text = text[: self._max_chars] + "\n\n... [content truncated]"
            truncated = True

        return ExtractionResult(
            content=text,
            metadata={
                "encoding": encoding,
                "line_count": len(text.splitlines()) or 1,
                "truncated": truncated,
            },
        )

    @staticmethod
    def _decode_with_bom(data: bytes) -> tuple[str, str]:
        if data.startswith(b"\xff\xfe"):
            return data[2:].decode("utf-16-le", errors="replace"), "utf-16-le"
        if data.startswith(b"\xfe\xff"):
            return data[2:].decode("utf-16-be", errors="replace"), "utf-16-be"
        if data.startswith(b"\xef\xbb\xbf"):
            return data[3:].decode("utf-8", errors="replace"), "utf-8"
        return data.decode("utf-8", errors="replace"), "utf-8"
