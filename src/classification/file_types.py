# src/classification/file_types.py - v1
"""Type classifier: file extension -> FileType, plus filename helpers.

Pure functions, no I/O. Nothing in here raises.
"""

from __future__ import annotations

from pathlib import PurePosixPath
from urllib.parse import unquote

from anyread.core.models import FileType, ParseMethod, SupportedFormat

# Extension (with dot, lowercase) -> file type.
EXTENSION_MAP: dict[str, FileType] = {
    # Spreadsheets
    ".xlsx": "excel",
    ".xls": "excel",
    ".csv": "csv",
    # Documents
    ".docx": "word",
    ".doc": "word",
    ".txt": "text",
    ".rtf": "text",
    # Data
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".xml": "xml",
    # Markup
    ".html": "html",
    ".htm": "html",
    ".md": "markdown",
    ".markdown": "markdown",
    ".pdf": "pdf",
    # Images
    ".jpg": "image",
    ".jpeg": "image",
    ".png": "image",
    ".gif": "image",
    ".webp": "image",
    ".bmp": "image",
    ".svg": "image",
    ".ico": "image",
    ".tiff": "image",
    ".tif": "image",
    # Audio (AI only)
    ".mp3": "audio",
    ".wav": "audio",
    ".ogg": "audio",
    ".m4a": "audio",
    ".flac": "audio",
    ".aac": "audio",
    # Video (AI only)
    ".mp4": "video",
    ".avi": "video",
    ".mov": "video",
    ".webm": "video",
    ".mkv": "video",
}

AI_ONLY_TYPES: frozenset[str] = frozenset({"image", "audio", "video"})

_MIME_MAP: dict[str, str] = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".bmp": "image/bmp",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
    ".tiff": "image/tiff",
    ".tif": "image/tiff",
    ".pdf": "application/pdf",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".xls": "application/vnd.ms-excel",
    ".csv": "text/csv",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".doc": "application/msword",
    ".txt": "text/plain",
    ".rtf": "application/rtf",
    ".json": "application/json",
    ".yaml": "text/yaml",
    ".yml": "text/yaml",
    ".xml": "application/xml",
    ".html": "text/html",
    ".htm": "text/html",
    ".md": "text/markdown",
    ".markdown": "text/markdown",
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".ogg": "audio/ogg",
    ".m4a": "audio/mp4",
    ".flac": "audio/flac",
    ".aac": "audio/aac",
    ".mp4": "video/mp4",
    ".avi": "video/x-msvideo",
    ".mov": "video/quicktime",
    ".webm": "video/webm",
    ".mkv": "video/x-matroska",
}

_TYPE_LABELS: dict[str, str] = {
    "excel": "Spreadsheet",
    "csv": "Spreadsheet",
    "word": "Document",
    "text": "Text",
    "pdf": "PDF",
    "json": "JSON",
    "yaml": "YAML",
    "xml": "XML",
    "html": "Web page",
    "markdown": "Markdown",
    "image": "Image",
    "audio": "Audio",
    "video": "Video",
    "unknown": "File",
}


def file_extension(filename: str) -> str:
    """Return the lowercased extension including the dot ('' if none)."""
    return PurePosixPath(filename).suffix.lower()


def detect_file_type(filename: str) -> FileType:
    """Classify a filename by its extension; unmapped extensions give 'unknown'."""
    return EXTENSION_MAP.get(file_extension(filename), "unknown")


def extract_file_name(url: str) -> str:
    """Derive a file name from a URL: decoded, last path segment, query stripped.

    Falls back to 'unknown' instead of raising.
    """
    try:
        decoded = unquote(url, errors="strict")
    except (UnicodeDecodeError, TypeError):
        return "unknown"
    name = decoded.split("/")[-1].split("?")[0]
    return name or "unknown"


def guess_mime_type(filename: str) -> str:
    """Best-effort MIME type from the extension."""
    return _MIME_MAP.get(file_extension(filename), "application/octet-stream")


def type_label(file_type: str) -> str:
    """Human-readable label used in formatted output titles."""
    return _TYPE_LABELS.get(file_type, "File")


def parse_method(file_type: str) -> ParseMethod:
    """How a file type gets parsed: locally, by AI, or locally with AI fallback."""
    if file_type in AI_ONLY_TYPES:
        return "AI"
    if file_type == "pdf":
        return "local-then-AI"
    return "local"


def list_supported_formats() -> list[SupportedFormat]:
    """List every known extension with its type and parse method."""
    return [
        SupportedFormat(extension=ext, type=file_type, method=parse_method(file_type))
        for ext, file_type in EXTENSION_MAP.items()
    ]
