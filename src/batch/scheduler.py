# src/batch/scheduler.py - v1
"""Batch scheduler: parse many URLs in sequential chunks of concurrent tasks.

Chunk k+1 starts only after every task of chunk k has settled, which bounds
in-flight requests to the configured concurrency. Inside a chunk, results are
collected in completion order.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Sequence

from anyread.classification.file_types import extract_file_name
from anyread.core.models import BatchOptions, ParsedFile

logger = logging.getLogger(__name__)

ParseFn = Callable[[str], Awaitable[ParsedFile]]


def chunked(urls: Sequence[str], size: int) -> list[list[str]]:
    """Split urls into consecutive chunks of at most size items."""
    return [list(urls[i : i + size]) for i in range(0, len(urls), size)]


class BatchScheduler:
    """Run a per-URL parse coroutine over a list of URLs.

    Args:
        parse_fn: Coroutine function producing one ParsedFile per URL.
        log: Logger (or adapter) for batch-level messages.
    """

    def __init__(self, parse_fn: ParseFn, log: logging.Logger | logging.LoggerAdapter | None = None):
        self._parse_fn = parse_fn
        self._log = log or logger

    async def run(self, urls: Sequence[str], options: BatchOptions | None = None) -> list[ParsedFile]:
        """Parse every URL and return the records.

        Raises:
            Exception: The first unexpected per-URL exception, only when
                continue_on_error is False. Tasks still running in that chunk
                are cancelled.
        """
        options = options or BatchOptions()
        total = len(urls)
        results: list[ParsedFile] = []
        completed = 0

        self._log.info("Batch parse of %d file(s), concurrency %d", total, options.concurrency)

        for chunk in chunked(urls, options.concurrency):
            tasks = [
                asyncio.create_task(self._settle(url, options.continue_on_error))
                for url in chunk
            ]
            try:
                for next_done in asyncio.as_completed(tasks):
                    record = await next_done
                    results.append(record)
                    completed += 1
                    if options.on_progress is not None:
                        options.on_progress(completed, total, record)
            except BaseException:
                pending = [t for t in tasks if not t.done()]
                for task in pending:
                    task.cancel()
                await asyncio.gather(*pending, return_exceptions=True)
                raise

        success_count = sum(1 for r in results if r.success)
        self._log.info("Batch parse finished: %d/%d succeeded", success_count, total)
        return results

    async def _settle(self, url: str, continue_on_error: bool) -> ParsedFile:
        try:
            return await self._parse_fn(url)
        except Exception as e:
            if not continue_on_error:
                raise
            self._log.error("Unexpected failure for %s: %s", url, e)
            return ParsedFile.failure(
                extract_file_name(url), url, "unknown", str(e) or type(e).__name__,
            )
