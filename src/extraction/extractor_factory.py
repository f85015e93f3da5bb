# src/extraction/extractor_factory.py - v3
"""Factory: instantiate the decoder for a file type."""

from __future__ import annotations

from typing import TYPE_CHECKING

from anyread.core.errors import UnsupportedFormatError
from anyread.extraction.base_extractor import BaseExtractor
from anyread.extraction.csv_extractor import CsvExtractor
from anyread.extraction.docx_extractor import DocxExtractor
from anyread.extraction.excel_extractor import ExcelExtractor
from anyread.extraction.html_extractor import HtmlExtractor
from anyread.extraction.json_extractor import JsonExtractor
from anyread.extraction.md_extractor import MdExtractor
from anyread.extraction.pdf_extractor import PdfExtractor
from anyread.extraction.txt_extractor import TxtExtractor
from anyread.extraction.xml_extractor import XmlExtractor
from anyread.extraction.yaml_extractor import YamlExtractor

if TYPE_CHECKING:
    from anyread.config.settings import ParserSettings

# Registry maps file type -> extractor class.
_EXTRACTOR_REGISTRY: dict[str, type[BaseExtractor]] = {}


def _register_defaults() -> None:
    """Register built-in extractors."""
    for cls in [ExcelExtractor, CsvExtractor, DocxExtractor, TxtExtractor, PdfExtractor,
                JsonExtractor, YamlExtractor, XmlExtractor, HtmlExtractor, MdExtractor]:
        _EXTRACTOR_REGISTRY[cls().file_type] = cls


_register_defaults()


def create_extractor(file_type: str, settings: ParserSettings | None = None) -> BaseExtractor:
    """Create an extractor for the given file type.

    Tabular extractors receive their section of the settings.

    Raises:
        UnsupportedFormatError: If no extractor is registered.
    """
    cls = _EXTRACTOR_REGISTRY.get(file_type)
    if cls is None:
        raise UnsupportedFormatError(file_type)
    if settings is not None:
        if cls is ExcelExtractor:
            return ExcelExtractor(settings.excel)
        if cls is CsvExtractor:
            return CsvExtractor(settings.csv)
    return cls()


def register_extractor(file_type: str, cls: type[BaseExtractor]) -> None:
    """Register a custom extractor for a file type."""
    _EXTRACTOR_REGISTRY[file_type] = cls


def local_file_types() -> list[str]:
    """Return file types that have a local decoder."""
    return sorted(_EXTRACTOR_REGISTRY)
