# src/__init__.py - v1
"""anyread: fetch files by URL and read them as plain text for LLM pipelines."""

from anyread.api.facade import (
    configure,
    detect_file_type,
    extract_file_name,
    get_default_parser,
    parse,
    parse_and_format,
    parse_many,
    reset_default_parser,
)
from anyread.classification.file_types import list_supported_formats
from anyread.config.settings import ParserSettings, load_settings
from anyread.core.errors import (
    AnyReadError,
    ConfigurationError,
    DecodeError,
    DownloadError,
    FormattingError,
    UnsupportedFormatError,
    VisionRecognitionError,
)
from anyread.core.models import BatchOptions, FormatOptions, ParsedFile, RawOutput
from anyread.pipeline.file_parser import FileParser
from anyread.pipeline.formatter import format_results
from anyread.version import __version__

__all__ = [
    "AnyReadError",
    "BatchOptions",
    "ConfigurationError",
    "DecodeError",
    "DownloadError",
    "FileParser",
    "FormatOptions",
    "FormattingError",
    "ParsedFile",
    "ParserSettings",
    "RawOutput",
    "UnsupportedFormatError",
    "VisionRecognitionError",
    "__version__",
    "configure",
    "detect_file_type",
    "extract_file_name",
    "format_results",
    "get_default_parser",
    "list_supported_formats",
    "load_settings",
    "parse",
    "parse_and_format",
    "parse_many",
    "reset_default_parser",
]
