# src/extraction/json_extractor.py - v1
"""JSON extractor: validates and pretty-prints the document."""

from __future__ import annotations

import json
from typing import Any

from anyread.core.errors import DecodeError
from anyread.core.models import ExtractionResult, FileType
from anyread.extraction.base_extractor import BaseExtractor


def describe_structure(data: Any) -> dict[str, Any]:
    """Shape summary shared by the JSON and YAML extractors."""
    if isinstance(data, list):
        return {"data_type": "array", "length": len(data)}
    if isinstance(data, dict):
        return {"data_type": "object", "keys": [str(k) for k in data]}
    return {"data_type": "primitive"}


class JsonExtractor(BaseExtractor):
    """Extractor for JSON files."""

    def __init__(self, prettify: bool = True) -> None:
        self._prettify = prettify

    @property
    def file_type(self) -> FileType:
        return "json"

    async def extract(self, data: bytes, file_name: str) -> ExtractionResult:
        text = data.decode("utf-8-sig", errors="replace")
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as e:
            raise DecodeError("json", str(e)) from e

        content = json.dumps(parsed, indent=2, ensure_ascii=False) if self._prettify else text
        return ExtractionResult(content=content, metadata=describe_structure(parsed))
