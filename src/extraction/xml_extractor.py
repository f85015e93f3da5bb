# src/extraction/xml_extractor.py - v1
"""XML extractor using lxml; renders the tree as JSON.

Element mapping: attributes under "$", text next to children or attributes
under "_", repeated child tags become lists, leaf elements become their text.
"""

from __future__ import annotations

import json
from typing import Any

from anyread.core.errors import DecodeError
from anyread.core.models import ExtractionResult, FileType
from anyread.extraction.base_extractor import BaseExtractor


def _local_name(tag: Any) -> str:
    return tag if isinstance(tag, str) else str(tag)


def element_to_data(element: Any) -> Any:
    """Convert an lxml element into nested dicts/lists/strings."""
    children = [c for c in element if isinstance(c.tag, str)]
    attrs = dict(element.attrib)
    text = (element.text or "").strip()
    for child in children:
        if child.tail and child.tail.strip():
            text = f"{text} {child.tail.strip()}".strip()

    if not children and not attrs:
        return text

    node: dict[str, Any] = {}
    if attrs:
        node["$"] = attrs
    if text:
        node["_"] = text
    for child in children:
        key = _local_name(child.tag)
        value = element_to_data(child)
        if key in node:
            existing = node[key]
            if isinstance(existing, list):
                existing.append(value)
            else:
                node[key] = [existing, value]
        else:
            node[key] = value
    return node


class XmlExtractor(BaseExtractor):
    """Extractor for XML files."""

    @property
    def file_type(self) -> FileType:
        return "xml"

    async def extract(self, data: bytes, file_name: str) -> ExtractionResult:
        try:
            from lxml import etree
        except ImportError as e:
            raise ImportError("lxml package required for XML extraction: pip install lxml") from e

        parser = etree.XMLParser(resolve_entities=False, no_network=True)
        try:
            root = etree.fromstring(data, parser=parser)
        except etree.XMLSyntaxError as e:
            raise DecodeError("xml", str(e)) from e
        if root is None:
            raise DecodeError("xml", "document has no root element")

        root_name = _local_name(root.tag)
        tree = {root_name: element_to_data(root)}
        return ExtractionResult(
            content=json.dumps(tree, indent=2, ensure_ascii=False),
            metadata={"root_element": root_name},
        )
