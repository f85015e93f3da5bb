# src/extraction/docx_extractor.py - v2
"""DOCX extractor using python-docx.

Extracts paragraph text (headings as Markdown markers) and tables.
Requires the 'python-docx' package. Legacy binary .doc files are rejected.
"""

from __future__ import annotations

import io
import logging

from anyread.core.errors import DecodeError
from anyread.core.models import ExtractionResult, FileType
from anyread.extraction.base_extractor import BaseExtractor
from anyread.extraction.tabular import render_markdown

logger = logging.getLogger(__name__)

_OLE2_SIGNATURE = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"
_EMPTY_DOCUMENT = "(document is empty)"


class DocxExtractor(BaseExtractor):
    """Extractor for Word documents (.docx)."""

    @property
    def file_type(self) -> FileType:
        return "word"

    async def extract(self, data: bytes, file_name: str) -> ExtractionResult:
        """Extract text and tables from a DOCX document."""
        try:
            import docx
        except ImportError as e:
            raise ImportError(
                "python-docx package required for DOCX extraction: "
                "pip install python-docx"
            ) from e

        if data.startswith(_OLE2_SIGNATURE):
            raise DecodeError("word", "legacy .doc format is not supported, convert it to .docx")

        try:
            doc = docx.Document(io.BytesIO(data))
        except Exception as e:
            if file_name.lower().endswith(".doc"):
                raise DecodeError(
                    "word", "legacy .doc format is not supported, convert it to .docx"
                ) from e
            raise DecodeError("word", str(e)) from e

        text_parts: list[str] = []
        for para in doc.paragraphs:
            if not para.text.strip():
                continue
            style_name = (para.style.name or "").lower() if para.style is not None else ""
            if "heading" in style_name:
                try:
                    level = int(style_name.replace("heading", "").strip())
                except ValueError:
                    level = 1
                text_parts.append(f"{'#' * level} {para.text}")
            else:
                text_parts.append(para.text)

        table_count = 0
        for table in doc.tables:
            rows = [[cell.text.strip() for cell in row.cells] for row in table.rows]
            if rows:
                table_count += 1
                text_parts.append(render_markdown(rows, len(rows)))

        content = "\n\n".join(text_parts)
        logger.debug("DOCX %s: %d parts, %d tables", file_name, len(text_parts), table_count)
        return ExtractionResult(
            content=content or _EMPTY_DOCUMENT,
            metadata={"paragraphs": len(doc.paragraphs), "tables": table_count},
        )
