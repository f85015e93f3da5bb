# tests/unit/download/test_fetcher.py - v1
"""Tests for download/fetcher.py using httpx.MockTransport."""

from __future__ import annotations

import httpx
import pytest

from anyread.config.settings import DownloadConfig
from anyread.core.errors import DownloadError, DownloadTooLargeError
from anyread.download.fetcher import HttpFetcher


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestHttpFetcher:
    @pytest.mark.asyncio
    async def test_returns_body_and_sends_headers(self):
        seen: dict[str, str] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(request.headers)
            return httpx.Response(200, content=b"a,b\n1,2")

        config = DownloadConfig(user_agent="anyread-test", headers={"X-Token": "t"})
        fetcher = HttpFetcher(config, client=_client(handler))
        assert await fetcher.fetch("https://files.local/a.csv") == b"a,b\n1,2"
        assert seen["user-agent"] == "anyread-test"
        assert seen["x-token"] == "t"

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        fetcher = HttpFetcher(client=_client(lambda request: httpx.Response(404)))
        with pytest.raises(DownloadError, match="HTTP 404"):
            await fetcher.fetch("https://files.local/missing.csv")

    @pytest.mark.asyncio
    async def test_declared_length_over_cap(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"x" * 100)

        fetcher = HttpFetcher(DownloadConfig(max_size_bytes=10), client=_client(handler))
        with pytest.raises(DownloadTooLargeError):
            await fetcher.fetch("https://files.local/big.csv")

    @pytest.mark.asyncio
    async def test_streamed_body_over_cap(self):
        async def body():
            for _ in range(5):
                yield b"x" * 8

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=body())

        fetcher = HttpFetcher(DownloadConfig(max_size_bytes=20), client=_client(handler))
        with pytest.raises(DownloadTooLargeError):
            await fetcher.fetch("https://files.local/chunked.csv")

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        fetcher = HttpFetcher(DownloadConfig(timeout_s=1.5), client=_client(handler))
        with pytest.raises(DownloadError, match="timed out after 1.5s"):
            await fetcher.fetch("https://files.local/slow.csv")

    @pytest.mark.asyncio
    async def test_connect_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        fetcher = HttpFetcher(client=_client(handler))
        with pytest.raises(DownloadError, match="refused"):
            await fetcher.fetch("https://files.local/a.csv")
