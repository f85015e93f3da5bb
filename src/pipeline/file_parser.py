# src/pipeline/file_parser.py - v1
"""FileParser: turn a URL into a uniform ParsedFile record.

Flow per URL:
    extract_file_name -> detect_file_type -> dispatch table handler
        local types   : fetch bytes -> format decoder
        pdf           : fetch bytes -> local decoder, AI fallback on decode error
        image/audio/video : AI path (vision provider or placeholder)
        unknown       : unsuccessful record

parse() is the error boundary: every exception is turned into an
unsuccessful record. AI failures never fail a record; they degrade to a
placeholder that points at the original URL.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Sequence

from anyread.batch.scheduler import BatchScheduler
from anyread.classification.file_types import (
    detect_file_type,
    extract_file_name,
    file_extension,
    guess_mime_type,
    list_supported_formats,
)
from anyread.config.settings import ParserSettings
from anyread.core.errors import UnsupportedFormatError
from anyread.core.models import (
    AIFileType,
    BatchOptions,
    FileMetadata,
    FileType,
    FormatOptions,
    ParsedFile,
    SupportedFormat,
)
from anyread.download.fetcher import HttpFetcher
from anyread.extraction.extractor_factory import create_extractor
from anyread.logging.context import file_context
from anyread.logging.logger import ParserLogger
from anyread.pipeline.formatter import format_results
from anyread.vision.base_provider import BaseVisionProvider
from anyread.vision.provider_factory import create_vision_provider

Handler = Callable[[str, str, FileType], Awaitable[ParsedFile]]

AI_PROMPTS: dict[AIFileType, str] = {
    "image": "Analyze this image in detail, including product information, visible text and model numbers.",
    "audio": "Transcribe and analyze the content of this audio.",
    "video": "Analyze the content of this video and describe the key information.",
    "pdf": "Analyze the content of this PDF document and extract the key information.",
}

PLACEHOLDER_LABELS: dict[AIFileType, str] = {
    "image": "Image file",
    "audio": "Audio file",
    "video": "Video file",
    "pdf": "PDF document",
}

_LOCAL_TYPES: tuple[FileType, ...] = (
    "excel", "csv", "word", "text", "json", "yaml", "xml", "html", "markdown",
)


def placeholder_content(file_type: AIFileType, file_name: str, url: str) -> str:
    """Link description returned when AI is unavailable or failed."""
    return (
        f"[{PLACEHOLDER_LABELS[file_type]}] {file_name}\n"
        f"File URL: {url}\n"
        "(AI must be configured to parse this file type; open the link to inspect it.)"
    )


class FileParser:
    """Parse files referenced by URL.

    Args:
        settings: Parser settings; loaded from the environment when omitted.
        fetcher: Byte fetcher; an HttpFetcher over settings.download by default.
        vision_provider: Vision adapter; built from settings.ai when that
            block is present.
    """

    def __init__(
        self,
        settings: ParserSettings | None = None,
        fetcher: HttpFetcher | None = None,
        vision_provider: BaseVisionProvider | None = None,
    ) -> None:
        self._settings = settings or ParserSettings()
        self._fetcher = fetcher or HttpFetcher(self._settings.download)
        if vision_provider is None and self._settings.ai is not None:
            vision_provider = create_vision_provider(self._settings.ai)
        self._vision = vision_provider

        log_cfg = self._settings.logging
        self.logger = ParserLogger(
            enabled=log_cfg.enabled,
            min_level=log_cfg.level,
            sink=log_cfg.sink,
            log_format=log_cfg.format,
        )

        self._handlers: dict[FileType, Handler] = {t: self._parse_local for t in _LOCAL_TYPES}
        self._handlers.update({
            "pdf": self._parse_pdf,
            "image": self._parse_with_ai,
            "audio": self._parse_with_ai,
            "video": self._parse_with_ai,
            "unknown": self._parse_unsupported,
        })

    @property
    def settings(self) -> ParserSettings:
        return self._settings

    @property
    def has_ai(self) -> bool:
        return self._vision is not None

    # --- Single file ---

    async def parse(self, url: str) -> ParsedFile:
        """Parse one URL. Never raises."""
        file_name = extract_file_name(url)
        file_type = detect_file_type(file_name)

        with file_context(file_name, file_type):
            self.logger.info("Parsing %s (%s)", file_name, file_type)
            handler = self._handlers[file_type]
            try:
                result = await handler(url, file_name, file_type)
            except Exception as e:
                self.logger.error("Parse failed: %s - %s", file_name, e)
                return ParsedFile.failure(file_name, url, file_type, str(e) or type(e).__name__)

            if result.success:
                self.logger.debug("Parsed %s (%d chars)", file_name, len(result.content))
            return result

    async def _parse_unsupported(self, url: str, file_name: str, file_type: FileType) -> ParsedFile:
        error = UnsupportedFormatError(file_name, file_extension(file_name))
        self.logger.warn("%s", error)
        return ParsedFile.failure(file_name, url, file_type, str(error))

    async def _parse_local(self, url: str, file_name: str, file_type: FileType) -> ParsedFile:
        data = await self._fetcher.fetch(url)
        return await self._decode(data, url, file_name, file_type)

    async def _parse_pdf(self, url: str, file_name: str, file_type: FileType) -> ParsedFile:
        data = await self._fetcher.fetch(url)
        try:
            return await self._decode(data, url, file_name, file_type)
        except Exception as e:
            self.logger.warn("Local PDF extraction failed for %s, trying AI: %s", file_name, e)
        return await self._parse_with_ai(url, file_name, file_type)

    async def _decode(self, data: bytes, url: str, file_name: str, file_type: FileType) -> ParsedFile:
        extractor = create_extractor(file_type, self._settings)
        result = await extractor.extract(data, file_name)
        metadata = FileMetadata(**{"size": len(data), **result.metadata})
        return ParsedFile(
            file_name=file_name,
            url=url,
            type=file_type,
            content=result.content,
            success=True,
            raw_data=result.raw_data,
            metadata=metadata,
        )

    def _ai_options(self, file_type: AIFileType) -> tuple[bool, str, int]:
        """Return (enabled, prompt, max_tokens) for an AI-path file type."""
        if file_type == "pdf":
            pdf = self._settings.pdf
            return pdf.enable_ai, pdf.prompt or AI_PROMPTS["pdf"], pdf.max_tokens
        image = self._settings.image
        prompt = AI_PROMPTS[file_type]
        if file_type == "image" and image.prompt:
            prompt = image.prompt
        return image.enable_ai, prompt, image.max_tokens

    async def _parse_with_ai(self, url: str, file_name: str, file_type: FileType) -> ParsedFile:
        metadata: dict[str, Any] = {"mime_type": guess_mime_type(file_name)}
        enabled, prompt, max_tokens = self._ai_options(file_type)

        if self._vision is not None and enabled:
            try:
                self.logger.info("Parsing %s with AI: %s", file_type, file_name)
                response = await self._vision.analyze_image(url, prompt=prompt, max_tokens=max_tokens)
            except Exception as e:
                self.logger.warn("AI parse failed for %s: %s", file_name, e)
            else:
                if response.usage is not None:
                    metadata["token_usage"] = response.usage.model_dump()
                return ParsedFile(
                    file_name=file_name,
                    url=url,
                    type=file_type,
                    content=response.content,
                    success=True,
                    metadata=FileMetadata(**metadata),
                )

        return ParsedFile(
            file_name=file_name,
            url=url,
            type=file_type,
            content=placeholder_content(file_type, file_name, url),
            success=True,
            metadata=FileMetadata(**metadata),
        )

    # --- Batch and formatting ---

    async def parse_many(
        self,
        urls: Sequence[str],
        options: BatchOptions | None = None,
        **kwargs: Any,
    ) -> list[ParsedFile]:
        """Parse several URLs in chunks of options.concurrency.

        Keyword arguments (concurrency, continue_on_error, on_progress) are
        accepted as a shortcut for building BatchOptions.
        """
        if options is None:
            options = BatchOptions(**kwargs)
        return await BatchScheduler(self.parse, self.logger).run(urls, options)

    def format(self, files: Sequence[ParsedFile], options: FormatOptions | None = None, **kwargs: Any) -> str:
        """Format records as text. See format_results()."""
        if options is None:
            options = FormatOptions(**kwargs)
        return format_results(files, options)

    # --- Helpers ---

    @staticmethod
    def detect_file_type(file_name: str) -> FileType:
        return detect_file_type(file_name)

    @staticmethod
    def extract_file_name(url: str) -> str:
        return extract_file_name(url)

    @staticmethod
    def supported_formats() -> list[SupportedFormat]:
        return list_supported_formats()

    # --- Resources ---

    async def aclose(self) -> None:
        """Release the vision provider's SDK client."""
        if self._vision is not None:
            await self._vision.aclose()

    async def __aenter__(self) -> FileParser:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
