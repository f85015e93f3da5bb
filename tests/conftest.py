# tests/conftest.py - v2
"""Shared test fixtures for unit tests.

Provides in-memory fetchers, mock vision providers, settings builders and
workbook factories. No network access: HTTP goes through httpx.MockTransport.
"""

from __future__ import annotations

import io
from typing import Any, Callable
from unittest.mock import AsyncMock

import httpx
import pytest

from anyread.config.settings import LoggingConfig, ParserSettings
from anyread.core.errors import DownloadError
from anyread.vision.models import TokenUsage, VisionResponse


class FakeFetcher:
    """Byte fetcher serving canned bodies keyed by URL."""

    def __init__(self, bodies: dict[str, bytes] | None = None):
        self.bodies = dict(bodies or {})
        self.calls: list[str] = []

    async def fetch(self, url: str) -> bytes:
        self.calls.append(url)
        if url not in self.bodies:
            raise DownloadError(url, "HTTP 404")
        return self.bodies[url]


# === FIXTURES: Settings ===


@pytest.fixture
def quiet_settings() -> ParserSettings:
    """Settings with parser logging disabled and no AI provider."""
    return ParserSettings(logging=LoggingConfig(enabled=False))


@pytest.fixture
def make_settings() -> Callable[..., ParserSettings]:
    """Factory for settings with logging disabled unless overridden."""

    def _make(**overrides: Any) -> ParserSettings:
        overrides.setdefault("logging", LoggingConfig(enabled=False))
        return ParserSettings(**overrides)

    return _make


# === FIXTURES: Fetch / vision ===


@pytest.fixture
def fake_fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def vision_response() -> VisionResponse:
    return VisionResponse(
        content="A red circuit board labelled ESP32-WROOM.",
        usage=TokenUsage(prompt_tokens=120, completion_tokens=30, total_tokens=150),
        model="gpt-4o",
        provider="openai",
    )


@pytest.fixture
def mock_vision_provider(vision_response: VisionResponse) -> AsyncMock:
    """Mock BaseVisionProvider with a default response."""
    provider = AsyncMock()
    provider.analyze_image = AsyncMock(return_value=vision_response)
    provider.aclose = AsyncMock()
    provider.provider_name = "mock"
    return provider


@pytest.fixture
def image_http_client() -> httpx.AsyncClient:
    """httpx client answering every GET with a small PNG body."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200, content=b"\x89PNG\r\n\x1a\nfake", headers={"content-type": "image/png; charset=binary"},
        )

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


# === FIXTURES: Workbooks ===


@pytest.fixture
def make_xlsx() -> Callable[[dict[str, list[list[Any]]]], bytes]:
    """Build an .xlsx file in memory from {sheet name: rows}."""
    openpyxl = pytest.importorskip("openpyxl")

    def _make(sheets: dict[str, list[list[Any]]]) -> bytes:
        wb = openpyxl.Workbook()
        wb.remove(wb.active)
        for name, rows in sheets.items():
            ws = wb.create_sheet(title=name)
            for row in rows:
                ws.append(row)
        buf = io.BytesIO()
        wb.save(buf)
        return buf.getvalue()

    return _make
