# src/logging/logger.py - v2
"""Logger factory, JSON and text formatters, and the parser's logging sink.

All loggers live under the "anyread" namespace. The CLI calls
setup_logging(); library users either configure logging themselves or let
ParserLogger attach a console handler on first use.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Callable, MutableMapping

from anyread.logging.context import get_context

ROOT_LOGGER_NAME = "anyread"
PARSER_LOGGER_NAME = "anyread.parser"

# Parser log levels, lowest first.
LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}
_LEVEL_NAMES = {v: k for k, v in LEVELS.items()}

_NOISY_LOGGERS = ("httpx", "httpcore")


class JsonFormatter(logging.Formatter):
    """Structured JSON log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        ctx = get_context()
        log_entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context_dict = ctx.as_dict()
        if context_dict:
            log_entry["context"] = context_dict

        if hasattr(record, "data") and record.data:  # type: ignore[attr-defined]
            log_entry["data"] = record.data  # type: ignore[attr-defined]

        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """Human-readable text formatter."""

    def format(self, record: logging.LogRecord) -> str:
        ctx = get_context()
        parts = [
            datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S"),
            f"[{record.levelname:8s}]",
            record.name,
        ]
        if ctx.file_name:
            parts.append(f"[{ctx.file_name}]")
        parts.append(f"- {record.getMessage()}")
        return " ".join(parts)


def get_logger(name: str) -> logging.Logger:
    """Get a named logger. Configuration is applied by setup_logging()."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def _make_formatter(log_format: str) -> logging.Formatter:
    return JsonFormatter() if log_format == "json" else TextFormatter()


def setup_logging(level: str = "INFO", log_format: str = "text") -> None:
    """Configure the root anyread logger.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR; "warn" is accepted).
        log_format: Output format ("json" or "text").
    """
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(LEVELS.get(level.lower(), getattr(logging, level.upper(), logging.INFO)))

    # Remove existing handlers to avoid duplicates on re-init
    root_logger.handlers.clear()

    # Progress output goes to stdout in the CLI, so logs use stderr.
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(_make_formatter(log_format))
    root_logger.addHandler(console_handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def ensure_console_handler(log_format: str = "text", level: int = logging.INFO) -> None:
    """Attach a stderr handler to the anyread logger if the app configured none."""
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    if root_logger.handlers:
        return
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_make_formatter(log_format))
    root_logger.addHandler(handler)
    if root_logger.level == logging.NOTSET:
        root_logger.setLevel(level)


class ParserLogger(logging.LoggerAdapter):
    """Logging sink used by FileParser.

    Three modes: disabled (no-op), a user callable receiving
    (level_name, message), or standard logging through "anyread.parser".
    Records below min_level are dropped in every mode.
    """

    def __init__(
        self,
        enabled: bool = True,
        min_level: str = "info",
        sink: Callable[[str, str], None] | None = None,
        log_format: str = "text",
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(logger or logging.getLogger(PARSER_LOGGER_NAME), {})
        self.enabled = enabled
        self.min_level = LEVELS[min_level]
        self.sink = sink
        self.log_format = log_format
        # Console handler is attached lazily, on the first record.
        self._console_pending = enabled and sink is None and logger is None

    def isEnabledFor(self, level: int) -> bool:  # noqa: N802
        if not self.enabled or level < self.min_level:
            return False
        if self.sink is not None:
            return True
        return self.logger.isEnabledFor(level)

    def log(self, level: int, msg: Any, *args: Any, **kwargs: Any) -> None:
        if not self.enabled or level < self.min_level:
            return
        if self.sink is not None:
            message = str(msg) % args if args else str(msg)
            self.sink(_LEVEL_NAMES.get(level, logging.getLevelName(level).lower()), message)
            return
        if self._console_pending:
            self._console_pending = False
            ensure_console_handler(self.log_format, self.min_level)
        if not self.logger.isEnabledFor(level):
            return
        msg, kwargs = self.process(msg, kwargs)
        self.logger.log(level, msg, *args, **kwargs)

    def warn(self, msg: Any, *args: Any, **kwargs: Any) -> None:  # type: ignore[override]
        self.log(logging.WARNING, msg, *args, **kwargs)
