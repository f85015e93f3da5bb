# src/extraction/tabular.py - v1
"""Tabular extraction for Excel workbooks and delimited text.

Rows are kept as a row-major matrix whose first row is the header row. A
positive max_rows caps how many matrix rows (header included) are rendered;
max_rows <= 0 means unlimited. Rendering formats: markdown, json, csv, raw.
"""

from __future__ import annotations

import io
import json
import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Any, Sequence

from anyread.core.errors import DecodeError
from anyread.core.models import RawOutput, RawSheetData, TableOutputFormat

logger = logging.getLogger(__name__)

# Legacy BIFF (.xls) workbooks are OLE2 compound files.
_OLE2_SIGNATURE = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"

# Only CRLF and LF end a line; other Unicode separators stay inside cells.
_LINE_BREAK = re.compile(r"\r?\n")


@dataclass
class TabularResult:
    """Rendered table text plus structured payload and counters."""

    content: str
    raw_data: RawOutput | None = None
    row_count: int = 0
    truncated: bool = False
    sheet_names: list[str] = field(default_factory=list)

    def metadata(self) -> dict[str, Any]:
        meta: dict[str, Any] = {"row_count": self.row_count, "truncated": self.truncated}
        if self.sheet_names:
            meta["sheet_names"] = list(self.sheet_names)
        return meta


def rows_to_include(total_rows: int, max_rows: int) -> int:
    """Number of matrix rows kept under the row cap."""
    limit = max_rows if max_rows > 0 else total_rows
    return min(total_rows, limit)


def is_truncated(total_rows: int, max_rows: int) -> bool:
    return max_rows > 0 and total_rows > max_rows


# --- Cell helpers ---


def cell_text(value: Any) -> str:
    """Stringify a cell; None renders as an empty string."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value)


def _markdown_cell(value: Any) -> str:
    text = cell_text(value).strip()
    return text.replace("\r\n", " ").replace("\n", " ").replace("|", "\\|")


def _csv_field(value: Any, delimiter: str) -> str:
    text = cell_text(value)
    if delimiter in text or '"' in text or "\n" in text:
        return '"' + text.replace('"', '""') + '"'
    return text


def _json_value(value: Any) -> Any:
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return value


# --- Renderers ---


def render_markdown(
    rows: Sequence[Sequence[Any]], include: int, total_rows: int | None = None
) -> str:
    """Render the header plus body rows up to `include` as a pipe table.

    A trailing note reports rows left out when the source (total_rows,
    defaulting to len(rows)) is longer.
    """
    if not rows:
        return ""
    kept = [list(r or []) for r in rows[:include]]
    width = max((len(r) for r in kept), default=0)
    width = max(width, 1)

    lines: list[str] = []
    header = kept[0] + [None] * (width - len(kept[0]))
    lines.append("| " + " | ".join(_markdown_cell(c) for c in header) + " |")
    lines.append("| " + " | ".join("---" for _ in header) + " |")
    for row in kept[1:]:
        padded = row + [None] * (width - len(row))
        lines.append("| " + " | ".join(_markdown_cell(c) for c in padded) + " |")

    omitted = (len(rows) if total_rows is None else total_rows) - include
    if omitted > 0:
        lines.append("")
        lines.append(f"... {omitted} more rows omitted")
    return "\n".join(lines)


def rows_to_records(rows: Sequence[Sequence[Any]], include: int) -> list[dict[str, Any]]:
    """Map each included body row to a dict keyed by its header cell.

    Missing or empty header cells fall back to a synthetic 'col<N>' key.
    """
    if not rows:
        return []
    headers = list(rows[0] or [])
    records: list[dict[str, Any]] = []
    for row in rows[1:include]:
        record: dict[str, Any] = {}
        for idx, cell in enumerate(row or []):
            header = cell_text(headers[idx]) if idx < len(headers) else ""
            record[header or f"col{idx}"] = _json_value(cell)
        records.append(record)
    return records


def render_csv(rows: Sequence[Sequence[Any]], include: int, delimiter: str = ",") -> str:
    """Re-serialize rows, quoting fields holding the delimiter, a quote or a newline."""
    return "\n".join(
        delimiter.join(_csv_field(c, delimiter) for c in (row or []))
        for row in rows[:include]
    )


# --- CSV ---


def parse_csv_line(line: str, delimiter: str = ",") -> list[str]:
    """Split one CSV line honoring double-quoted fields and "" escapes.

    The delimiter only splits outside quotes. Fields are trimmed.
    """
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0
    n = len(line)
    while i < n:
        char = line[i]
        if in_quotes:
            if char == '"':
                if i + 1 < n and line[i + 1] == '"':
                    current.append('"')
                    i += 1
                else:
                    in_quotes = False
            else:
                current.append(char)
        elif char == '"':
            in_quotes = True
        elif char == delimiter:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1
    fields.append("".join(current).strip())
    return fields


def parse_csv(
    data: bytes,
    file_name: str,
    delimiter: str = ",",
    max_rows: int = -1,
    output_format: TableOutputFormat = "markdown",
) -> TabularResult:
    """Parse delimited text into the requested output format."""
    text = data.decode("utf-8-sig", errors="replace")
    lines = [line for line in _LINE_BREAK.split(text) if line.strip()]
    if not lines:
        logger.debug("CSV %s is empty", file_name)
        return TabularResult(content="(empty file)")

    total = len(lines)
    include = rows_to_include(total, max_rows)
    truncated = is_truncated(total, max_rows)
    rows = [parse_csv_line(line, delimiter) for line in lines[:include]]

    raw_data: RawOutput | None = None
    if output_format == "raw":
        headers = list(rows[0])
        raw_data = RawOutput(
            sheets=[RawSheetData(name="CSV", headers=headers, rows=rows, total_rows=total)]
        )
        content = f"CSV: {len(headers)} columns, {total} rows"
    elif output_format == "markdown":
        content = render_markdown(rows, include, total_rows=total)
    elif output_format == "json":
        content = json.dumps(rows_to_records(rows, include), indent=2, ensure_ascii=False)
    else:
        content = render_csv(rows, include, delimiter)

    return TabularResult(
        content=content.strip(),
        raw_data=raw_data,
        row_count=include,
        truncated=truncated,
    )


# --- Excel ---


def _trim_row(row: Sequence[Any]) -> list[Any]:
    cells = list(row)
    while cells and cells[-1] is None:
        cells.pop()
    return cells


def _is_blank(row: Sequence[Any]) -> bool:
    return all(c is None or (isinstance(c, str) and not c.strip()) for c in row)


def _load_xlsx(data: bytes) -> list[tuple[str, list[list[Any]]]]:
    try:
        import openpyxl
    except ImportError as e:
        raise ImportError(
            "openpyxl package required for Excel extraction: pip install openpyxl"
        ) from e

    workbook = openpyxl.load_workbook(io.BytesIO(data), read_only=True, data_only=True)
    try:
        sheets: list[tuple[str, list[list[Any]]]] = []
        for worksheet in workbook.worksheets:
            rows = [
                _trim_row(row)
                for row in worksheet.iter_rows(values_only=True)
                if not _is_blank(row)
            ]
            sheets.append((worksheet.title, rows))
        return sheets
    finally:
        workbook.close()


def _load_xls(data: bytes) -> list[tuple[str, list[list[Any]]]]:
    try:
        import xlrd
    except ImportError as e:
        raise ImportError(
            "xlrd package required for legacy .xls extraction: pip install xlrd"
        ) from e

    book = xlrd.open_workbook(file_contents=data)
    sheets: list[tuple[str, list[list[Any]]]] = []
    for sheet in book.sheets():
        rows: list[list[Any]] = []
        for r in range(sheet.nrows):
            values = [
                None if cell.ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK) else cell.value
                for cell in sheet.row(r)
            ]
            if not _is_blank(values):
                rows.append(_trim_row(values))
        sheets.append((sheet.name, rows))
    return sheets


def load_workbook_rows(data: bytes, file_name: str) -> list[tuple[str, list[list[Any]]]]:
    """Decode a workbook into (sheet name, row matrix) pairs in sheet order.

    Raises:
        DecodeError: If the bytes are not a readable workbook.
    """
    try:
        if data.startswith(_OLE2_SIGNATURE):
            return _load_xls(data)
        return _load_xlsx(data)
    except ImportError:
        raise
    except Exception as e:
        raise DecodeError("excel", f"{file_name}: {e}") from e


def parse_excel(
    data: bytes,
    file_name: str,
    max_rows: int = -1,
    all_sheets: bool = True,
    output_format: TableOutputFormat = "markdown",
) -> TabularResult:
    """Parse a workbook into the requested output format.

    row_count sums the included rows of every processed sheet; truncated
    stays True once any processed sheet exceeded max_rows.
    """
    sheets = load_workbook_rows(data, file_name)
    sheet_names = [name for name, _ in sheets]
    to_process = sheets if all_sheets else sheets[:1]

    blocks: list[str] = []
    raw_sheets: list[RawSheetData] = []
    row_count = 0
    truncated = False

    for name, rows in to_process:
        if not rows:
            continue
        total = len(rows)
        include = rows_to_include(total, max_rows)
        if is_truncated(total, max_rows):
            truncated = True

        if output_format == "raw":
            raw_sheets.append(
                RawSheetData(name=name, headers=[], rows=rows[:include], total_rows=total)
            )
            blocks.append(f"Sheet {name}: {total} rows")
        elif output_format == "markdown":
            blocks.append(f"## Sheet: {name}\n\n" + render_markdown(rows, include))
        elif output_format == "json":
            payload = {"sheet": name, "data": rows_to_records(rows, include)}
            blocks.append(json.dumps(payload, indent=2, ensure_ascii=False, default=str))
        else:
            blocks.append(render_csv(rows, include))

        row_count += include

    separator = "\n" if output_format == "raw" else "\n\n"
    return TabularResult(
        content=separator.join(blocks).strip(),
        raw_data=RawOutput(sheets=raw_sheets) if output_format == "raw" else None,
        row_count=row_count,
        truncated=truncated,
        sheet_names=sheet_names,
    )
