# src/extraction/base_extractor.py - v1
"""Abstract extractor interface for file formats."""

from __future__ import annotations

from abc import ABC, abstractmethod

from anyread.core.models import ExtractionResult, FileType


class BaseExtractor(ABC):
    """Unified interface for format decoders.

    Decoders receive the fully buffered file bytes and return the text content
    plus decoder-specific metadata. Malformed input raises DecodeError.
    """

    @property
    @abstractmethod
    def file_type(self) -> FileType:
        """File type this extractor handles (e.g. 'pdf')."""

    @abstractmethod
    async def extract(self, data: bytes, file_name: str) -> ExtractionResult:
        """Decode bytes into text content and metadata."""

    @staticmethod
    def _decode_text(data: bytes) -> str:
        return data.decode("utf-8", errors="replace")
