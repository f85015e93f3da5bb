# src/download/fetcher.py - v1
"""Byte fetcher: download a URL fully into memory with a size cap.

The response is streamed so that an oversized body is rejected as soon as
the cap is crossed, even when the server sends no Content-Length.
"""

from __future__ import annotations

import logging

import httpx

from anyread.config.settings import DownloadConfig
from anyread.core.errors import DownloadError, DownloadTooLargeError

logger = logging.getLogger(__name__)


class HttpFetcher:
    """Fetch remote files over HTTP(S).

    Args:
        config: Download block of ParserSettings.
        client: Optional shared httpx client (tests inject a MockTransport).
    """

    def __init__(self, config: DownloadConfig | None = None, client: httpx.AsyncClient | None = None):
        self._config = config or DownloadConfig()
        self._client = client

    @property
    def config(self) -> DownloadConfig:
        return self._config

    def _headers(self) -> dict[str, str]:
        return {"User-Agent": self._config.user_agent, **self._config.headers}

    async def fetch(self, url: str) -> bytes:
        """Download url and return its body.

        Raises:
            DownloadTooLargeError: If the body exceeds max_size_bytes.
            DownloadError: On network error, timeout or non-2xx status.
        """
        if self._client is not None:
            return await self._fetch_with(self._client, url)
        async with httpx.AsyncClient() as client:
            return await self._fetch_with(client, url)

    async def _fetch_with(self, client: httpx.AsyncClient, url: str) -> bytes:
        max_size = self._config.max_size_bytes
        logger.debug("Downloading %s", url)
        try:
            async with client.stream(
                "GET", url, headers=self._headers(), timeout=self._config.timeout_s, follow_redirects=True,
            ) as resp:
                resp.raise_for_status()

                declared = resp.headers.get("content-length")
                if declared and declared.isdigit() and int(declared) > max_size:
                    raise DownloadTooLargeError(url, max_size)

                buf = bytearray()
                async for chunk in resp.aiter_bytes():
                    buf.extend(chunk)
                    if len(buf) > max_size:
                        raise DownloadTooLargeError(url, max_size)
        except httpx.TimeoutException as e:
            raise DownloadError(url, f"timed out after {self._config.timeout_s}s") from e
        except httpx.HTTPStatusError as e:
            raise DownloadError(url, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise DownloadError(url, str(e) or type(e).__name__) from e

        logger.debug("Downloaded %s (%d bytes)", url, len(buf))
        return bytes(buf)
