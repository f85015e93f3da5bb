# src/extraction/pdf_extractor.py - v2
"""PDF text extractor using PyMuPDF (fitz).

Requires the 'pymupdf' package. Any failure here makes the orchestrator
fall back to the vision provider.
"""

from __future__ import annotations

import logging

from anyread.core.errors import DecodeError
from anyread.core.models import ExtractionResult, FileType
from anyread.extraction.base_extractor import BaseExtractor

logger = logging.getLogger(__name__)

_EMPTY_PDF = "(PDF contains no extractable text)"


class PdfExtractor(BaseExtractor):
    """Extractor for PDF files using PyMuPDF."""

    @property
    def file_type(self) -> FileType:
        return "pdf"

    async def extract(self, data: bytes, file_name: str) -> ExtractionResult:
        """Extract page text from a PDF document."""
        try:
            import fitz  # PyMuPDF
        except ImportError as e:
            raise ImportError(
                "pymupdf package required for PDF extraction: pip install pymupdf"
            ) from e

        try:
            doc = fitz.open(stream=data, filetype="pdf")
        except Exception as e:
            raise DecodeError("pdf", str(e)) from e

        try:
            pages = [page.get_text("text") for page in doc]
            info = {k: v for k, v in (doc.metadata or {}).items() if v}
            page_count = len(doc)
        finally:
            doc.close()

        text = "\n".join(pages).strip()
        logger.debug("PDF %s: %d pages, %d chars", file_name, page_count, len(text))
        return ExtractionResult(
            content=text or _EMPTY_PDF,
            metadata={"pages": page_count, "info": info},
        )
