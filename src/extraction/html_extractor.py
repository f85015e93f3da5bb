# src/extraction/html_extractor.py - v1
"""HTML extractor using BeautifulSoup: visible text plus page metadata."""

from __future__ import annotations

import re

from anyread.core.models import ExtractionResult, FileType
from anyread.extraction.base_extractor import BaseExtractor

_STRIP_TAGS = ["script", "style", "noscript", "iframe", "svg"]
_WHITESPACE_RE = re.compile(r"\s+")


class HtmlExtractor(BaseExtractor):
    """Extractor for HTML pages (.html, .htm)."""

    @property
    def file_type(self) -> FileType:
        return "html"

    async def extract(self, data: bytes, file_name: str) -> ExtractionResult:
        try:
            from bs4 import BeautifulSoup
        except ImportError as e:
            raise ImportError(
                "beautifulsoup4 package required for HTML extraction: "
                "pip install beautifulsoup4"
            ) from e

        soup = BeautifulSoup(self._decode_text(data), "html.parser")

        title_tag = soup.find("title")
        title = title_tag.get_text().strip() if title_tag else ""
        meta_desc = soup.find("meta", attrs={"name": "description"})
        description = meta_desc.get("content") if meta_desc else None
        links = len(soup.find_all("a"))
        images = len(soup.find_all("img"))

        for tag in soup(_STRIP_TAGS):
            tag.decompose()

        root = soup.body or soup
        if root is soup and title_tag is not None:
            title_tag.decompose()
        text = _WHITESPACE_RE.sub(" ", root.get_text(" ")).strip()
        if title:
            text = f"# {title}\n\n{text}"

        return ExtractionResult(
            content=text,
            metadata={
                "title": title or None,
                "description": description,
                "links": links,
                "images": images,
            },
        )
