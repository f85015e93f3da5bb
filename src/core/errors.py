# src/core/errors.py - v1
"""Error taxonomy shared by the fetcher, decoders, vision adapters and formatter.

Per-URL processing never lets these escape: FileParser.parse() turns them into
an unsuccessful ParsedFile. Only FormattingError and, with
continue_on_error=False, batch failures reach the caller.
"""

from __future__ import annotations


class AnyReadError(Exception):
    """Base class for all anyread errors."""


class ConfigurationError(AnyReadError):
    """Raised when configuration is internally inconsistent."""


class UnsupportedFormatError(AnyReadError):
    """Extension is not in the classification table."""

    def __init__(self, file_name: str, extension: str = ""):
        self.file_name = file_name
        self.extension = extension
        if extension:
            super().__init__(f"Unsupported file format: {extension} ({file_name})")
        else:
            super().__init__(f"Unsupported file format: {file_name}")


class DownloadError(AnyReadError):
    """Network error, timeout or bad status while fetching bytes."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Download failed for {url}: {reason}")


class DownloadTooLargeError(DownloadError):
    """Remote file exceeds the configured size cap."""

    def __init__(self, url: str, max_size_bytes: int):
        self.max_size_bytes = max_size_bytes
        super().__init__(url, f"file exceeds size limit of {max_size_bytes} bytes")


class DecodeError(AnyReadError):
    """A format decoder rejected malformed content."""

    def __init__(self, file_type: str, message: str):
        self.file_type = file_type
        super().__init__(f"{file_type.upper()} parse failed: {message}")


class EmptyResponseError(AnyReadError):
    """Vision provider answered without any text."""


class VisionRecognitionError(AnyReadError):
    """Vision call failed after all retries (or the image could not be fetched)."""

    def __init__(self, provider: str, attempts: int, last_error: Exception | None):
        self.provider = provider
        self.attempts = attempts
        self.last_error = last_error
        reason = str(last_error) if last_error is not None else "unknown error"
        super().__init__(
            f"Vision recognition failed ({provider}, {attempts} attempt(s)): {reason}"
        )


class FormattingError(AnyReadError):
    """Raised by format_results() when on_error='error' meets a failed file."""

    def __init__(self, file_name: str, error: str | None):
        self.file_name = file_name
        self.error = error
        super().__init__(f"File parse failed: {file_name} - {error}")
