# src/core/models.py - v1
"""Shared Pydantic domain models used across modules.

No module redefines these types; all imports come from core.models.
"""

from __future__ import annotations

from typing import Any, Callable, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

# === FILE TYPES ===

FileType = Literal[
    "excel",
    "csv",
    "word",
    "text",
    "pdf",
    "json",
    "yaml",
    "xml",
    "html",
    "markdown",
    "image",
    "audio",
    "video",
    "unknown",
]

AIFileType = Literal["image", "audio", "video", "pdf"]

TableOutputFormat = Literal["markdown", "json", "csv", "raw"]

ParseMethod = Literal["local", "AI", "local-then-AI"]


# === TABULAR PAYLOAD ===


class RawSheetData(BaseModel):
    """One sheet of a raw tabular payload."""

    name: str
    headers: list[Any] = Field(default_factory=list)
    rows: list[list[Any]] = Field(default_factory=list)
    total_rows: int = 0


class RawOutput(BaseModel):
    """Structured table returned for excel/csv when output_format is 'raw'."""

    sheets: list[RawSheetData] = Field(default_factory=list)


# === PARSE RESULTS ===


class FileMetadata(BaseModel):
    """Metadata bag attached to a parsed file.

    Decoders add their own keys (pages, encoding, headings, ...); unknown
    keys are kept as-is.
    """

    model_config = ConfigDict(extra="allow")

    size: int | None = None
    mime_type: str | None = None
    sheet_names: list[str] | None = None
    row_count: int | None = None
    truncated: bool | None = None


class ExtractionResult(BaseModel):
    """Output of a single format decoder."""

    content: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    raw_data: RawOutput | None = None


class ParsedFile(BaseModel):
    """Uniform record produced once per URL. Immutable."""

    model_config = ConfigDict(frozen=True)

    file_name: str
    url: str
    type: FileType
    content: str = ""
    success: bool
    error: str | None = None
    raw_data: RawOutput | None = None
    metadata: FileMetadata | None = None

    @model_validator(mode="after")
    def check_outcome(self) -> ParsedFile:
        if self.success and self.error is not None:
            raise ValueError("successful ParsedFile must not carry an error")
        if not self.success:
            if self.content:
                raise ValueError("failed ParsedFile must have empty content")
            if not self.error:
                raise ValueError("failed ParsedFile requires an error message")
        return self

    @classmethod
    def failure(
        cls, file_name: str, url: str, file_type: FileType, error: str
    ) -> ParsedFile:
        """Build an unsuccessful record."""
        return cls(
            file_name=file_name,
            url=url,
            type=file_type,
            content="",
            success=False,
            error=error or "unknown error",
        )


class SupportedFormat(BaseModel):
    """Entry of the supported-format listing."""

    extension: str
    type: FileType
    method: ParseMethod


# === BATCH / FORMAT OPTIONS ===

ProgressCallback = Callable[[int, int, Optional[ParsedFile]], None]


class BatchOptions(BaseModel):
    """Options for FileParser.parse_many()."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    concurrency: int = Field(default=3, ge=1)
    continue_on_error: bool = True
    on_progress: Optional[ProgressCallback] = None


class FormatOptions(BaseModel):
    """Options for format_results()."""

    include_title: bool = True
    include_url: bool = False
    separator: str = "---"
    on_error: Literal["skip", "include", "error"] = "skip"
