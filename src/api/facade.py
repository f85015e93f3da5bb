# src/api/facade.py - v2
"""Public API facade: a lazily built default parser plus convenience coroutines.

Usage:
    from anyread.api.facade import parse, parse_and_format
    record = await parse("https://example.com/report.xlsx")
    text = await parse_and_format(urls, format_options=FormatOptions(include_url=True))

Functions that accept explicit settings build a one-off FileParser and leave
the process-wide default untouched.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from anyread.classification.file_types import detect_file_type as _detect_file_type
from anyread.classification.file_types import extract_file_name as _extract_file_name
from anyread.config.settings import ParserSettings
from anyread.core.models import BatchOptions, FileType, FormatOptions, ParsedFile
from anyread.pipeline.file_parser import FileParser
from anyread.pipeline.formatter import format_results

logger = logging.getLogger(__name__)

_default_parser: FileParser | None = None


def get_default_parser() -> FileParser:
    """Return the process-wide parser, building it on first use."""
    global _default_parser
    if _default_parser is None:
        _default_parser = FileParser()
        logger.debug("Created default FileParser")
    return _default_parser


def configure(settings: ParserSettings) -> FileParser:
    """Replace the process-wide parser with one built from settings."""
    global _default_parser
    _default_parser = FileParser(settings)
    logger.debug("Reconfigured default FileParser")
    return _default_parser


def reset_default_parser() -> None:
    """Forget the process-wide parser; the next call builds a fresh one."""
    global _default_parser
    _default_parser = None


def _parser_for(settings: ParserSettings | None) -> FileParser:
    return FileParser(settings) if settings is not None else get_default_parser()


async def parse(url: str, settings: ParserSettings | None = None) -> ParsedFile:
    """Parse a single URL. Never raises."""
    return await _parser_for(settings).parse(url)


async def parse_many(
    urls: Sequence[str],
    options: BatchOptions | None = None,
    settings: ParserSettings | None = None,
    **kwargs: Any,
) -> list[ParsedFile]:
    """Parse several URLs with chunked concurrency."""
    return await _parser_for(settings).parse_many(urls, options, **kwargs)


async def parse_and_format(
    urls: str | Sequence[str],
    batch_options: BatchOptions | None = None,
    format_options: FormatOptions | None = None,
    settings: ParserSettings | None = None,
) -> str:
    """Parse one or more URLs and return the formatted text.

    Raises:
        FormattingError: If format_options.on_error is "error" and a file failed.
    """
    url_list = [urls] if isinstance(urls, str) else list(urls)
    files = await _parser_for(settings).parse_many(url_list, batch_options)
    return format_results(files, format_options)


def detect_file_type(file_name: str) -> FileType:
    return _detect_file_type(file_name)


def extract_file_name(url: str) -> str:
    return _extract_file_name(url)
