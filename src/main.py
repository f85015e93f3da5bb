# src/main.py - v2
"""CLI entry point: parse and formats commands.

Usage:
    anyread parse <url> [<url> ...] [options]
    anyread formats
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from anyread.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    _setup_logging(args.verbose)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        return asyncio.run(args.func(args))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="anyread",
        description=f"anyread v{__version__} - read remote files as plain text",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- parse ---
    p_parse = subparsers.add_parser("parse", help="Parse one or more file URLs")
    p_parse.add_argument("urls", nargs="+", help="File URLs")
    p_parse.add_argument(
        "-c", "--concurrency", type=int, default=3,
        help="Files parsed concurrently (default: 3)",
    )
    p_parse.add_argument(
        "--stop-on-error", action="store_true",
        help="Abort the batch on the first unexpected error",
    )
    p_parse.add_argument(
        "--json", action="store_true",
        help="Print records as JSON instead of formatted text",
    )
    p_parse.add_argument(
        "--include-url", action="store_true",
        help="Add a URL line under each title",
    )
    p_parse.add_argument(
        "--separator", default="---",
        help="Separator between files (default: ---)",
    )
    p_parse.add_argument(
        "--on-error", choices=["skip", "include", "error"], default="include",
        help="How failed files are formatted (default: include)",
    )
    p_parse.add_argument(
        "--provider", choices=["openai", "gemini", "anthropic", "custom"], default=None,
        help="Vision provider for images, audio, video and PDF fallback",
    )
    p_parse.add_argument("--api-key", default=None, help="Vision provider API key")
    p_parse.add_argument("--model", default=None, help="Vision model name")
    p_parse.add_argument("--base-url", default=None, help="Vision provider base URL")
    p_parse.set_defaults(func=_cmd_parse)

    # --- formats ---
    p_formats = subparsers.add_parser("formats", help="List supported file formats")
    p_formats.set_defaults(func=_cmd_formats)

    return parser


def _build_settings(args: argparse.Namespace):
    """Build ParserSettings from the environment plus CLI overrides."""
    from anyread.config.settings import AIConfig, LoggingConfig, load_settings

    overrides: dict[str, object] = {
        "logging": LoggingConfig(level="debug" if args.verbose else "info"),
    }
    if args.provider:
        overrides["ai"] = AIConfig(
            provider=args.provider,
            api_key=args.api_key or "",
            model=args.model,
            base_url=args.base_url,
        )
    return load_settings(**overrides)


async def _cmd_parse(args: argparse.Namespace) -> int:
    """Parse URLs and print the result."""
    from anyread.core.models import BatchOptions, FormatOptions, ParsedFile
    from anyread.pipeline.file_parser import FileParser

    def _on_progress(completed: int, total: int, record: ParsedFile | None) -> None:
        status = "ok" if record is not None and record.success else "failed"
        name = record.file_name if record is not None else "?"
        print(f"[{completed}/{total}] {name}: {status}", file=sys.stderr)

    options = BatchOptions(
        concurrency=max(1, args.concurrency),
        continue_on_error=not args.stop_on_error,
        on_progress=_on_progress,
    )

    async with FileParser(_build_settings(args)) as file_parser:
        files = await file_parser.parse_many(args.urls, options)

        if args.json:
            print(json.dumps(
                [f.model_dump(mode="json") for f in files],
                ensure_ascii=False, indent=2,
            ))
        else:
            print(file_parser.format(files, FormatOptions(
                include_url=args.include_url,
                separator=args.separator,
                on_error=args.on_error,
            )))

    return 0 if all(f.success for f in files) else 2


async def _cmd_formats(args: argparse.Namespace) -> int:
    """List supported extensions with their type and parse method."""
    from anyread.classification.file_types import list_supported_formats

    for fmt in list_supported_formats():
        print(f"  {fmt.extension:<10} {fmt.type:<10} {fmt.method}")
    return 0


def _setup_logging(verbose: bool) -> None:
    """Configure logging for CLI usage."""
    from anyread.logging.logger import setup_logging

    setup_logging(level="DEBUG" if verbose else "WARNING", log_format="text")


if __name__ == "__main__":
    sys.exit(main())
