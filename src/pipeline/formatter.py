# src/pipeline/formatter.py - v1
"""Result formatter: join parsed records into one text block for an LLM prompt."""

from __future__ import annotations

from typing import Iterable

from anyread.classification.file_types import type_label
from anyread.core.errors import FormattingError
from anyread.core.models import FormatOptions, ParsedFile


def format_failure(file: ParsedFile) -> str:
    return f"[{file.file_name}] parse failed: {file.error}"


def format_record(file: ParsedFile, include_title: bool = True, include_url: bool = False) -> str:
    """Render one successful record: optional title and URL lines, then content."""
    text = ""
    if include_title:
        text += f"[{type_label(file.type)}] {file.file_name}\n"
    if include_url:
        text += f"URL: {file.url}\n"
    return text + file.content


def format_results(files: Iterable[ParsedFile], options: FormatOptions | None = None) -> str:
    """Format records in input order, joined by "\\n<separator>\\n".

    Failed records follow options.on_error: "skip" drops them, "include"
    emits a one-line failure note, "error" raises on the first one met.

    Raises:
        FormattingError: With on_error="error", at the first failed record.
    """
    options = options or FormatOptions()
    parts: list[str] = []

    for file in files:
        if not file.success:
            if options.on_error == "skip":
                continue
            if options.on_error == "error":
                raise FormattingError(file.file_name, file.error)
            parts.append(format_failure(file))
            continue
        parts.append(format_record(file, options.include_title, options.include_url))

    return f"\n{options.separator}\n".join(parts)
