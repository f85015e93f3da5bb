# src/extraction/yaml_extractor.py - v2
"""YAML extractor using PyYAML; renders the document as JSON."""

from __future__ import annotations

import json
from typing import Any

from anyread.core.errors import DecodeError
from anyread.core.models import ExtractionResult, FileType
from anyread.extraction.base_extractor import BaseExtractor
from anyread.extraction.json_extractor import describe_structure


def _json_safe_keys(value: Any) -> Any:
    """Recursively stringify mapping keys JSON cannot hold (dates, timestamps)."""
    if isinstance(value, dict):
        return {
            (k if k is None or isinstance(k, (str, int, float, bool)) else str(k)): _json_safe_keys(v)
            for k, v in value.items()
        }
    if isinstance(value, list):
        return [_json_safe_keys(v) for v in value]
    return value


class YamlExtractor(BaseExtractor):
    """Extractor for YAML files (.yaml, .yml)."""

    @property
    def file_type(self) -> FileType:
        return "yaml"

    async def extract(self, data: bytes, file_name: str) -> ExtractionResult:
        import yaml

        try:
            parsed = yaml.safe_load(self._decode_text(data))
        except yaml.YAMLError as e:
            raise DecodeError("yaml", str(e)) from e

        if parsed is None or isinstance(parsed, (dict, list)):
            try:
                content = json.dumps(
                    _json_safe_keys(parsed), indent=2, ensure_ascii=False, default=str,
                )
            except (TypeError, ValueError) as e:
                raise DecodeError("yaml", f"cannot render document: {e}") from e
        else:
            content = str(parsed)
        return ExtractionResult(
            content=content,
            metadata={"data_type": describe_structure(parsed)["data_type"]},
        )
