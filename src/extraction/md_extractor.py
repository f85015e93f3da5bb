# src/extraction/md_extractor.py - v3
"""Markdown extractor: verbatim text plus heading/code/table hints."""

from __future__ import annotations

import re

from anyread.core.models import ExtractionResult, FileType
from anyread.extraction.base_extractor import BaseExtractor

_HEADING_RE = re.compile(r"^#{1,6}\s+(.+)$", re.MULTILINE)
_CODE_BLOCK_RE = re.compile(r"```[\s\S]*?```")
_TABLE_ROW_RE = re.compile(r"\|.+\|")
_TABLE_SEPARATOR_RE = re.compile(r"^\|[\s\-:|]+\|$", re.MULTILINE)


class MdExtractor(BaseExtractor):
    """Extractor for Markdown files (.md, .markdown)."""

    @property
    def file_type(self) -> FileType:
        return "markdown"

    async def extract(self, data: bytes, file_name: str) -> ExtractionResult:
        text = self._decode_text(data)
        headings = [h.strip() for h in _HEADING_RE.findall(text)]
        return ExtractionResult(
            content=text,
            metadata={
                "headings": headings,
                "has_code_blocks": bool(_CODE_BLOCK_RE.search(text)),
                "has_tables": bool(
                    _TABLE_ROW_RE.search(text) and _TABLE_SEPARATOR_RE.search(text)
                ),
            },
        )
