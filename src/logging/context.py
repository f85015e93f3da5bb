# src/logging/context.py - v2
"""Contextual logging support: attach the file being parsed to log records.

Each FileParser.parse() call runs in its own asyncio task, and every task
gets a copy of the context, so concurrent parses in a batch never see each
other's file name.
"""

from __future__ import annotations

import contextvars
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator

_file_name: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "file_name", default=None
)
_file_type: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "file_type", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    file_name: str | None = None
    file_type: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(file_name=_file_name.get(), file_type=_file_type.get())


def set_file_context(file_name: str, file_type: str | None = None) -> None:
    """Set the file currently being parsed."""
    _file_name.set(file_name)
    _file_type.set(file_type)


def clear_context() -> None:
    """Reset all context variables."""
    _file_name.set(None)
    _file_type.set(None)


@contextmanager
def file_context(file_name: str, file_type: str | None = None) -> Iterator[LogContext]:
    """Scope the file context to a block, restoring the previous values after."""
    name_token = _file_name.set(file_name)
    type_token = _file_type.set(file_type)
    try:
        yield get_context()
    finally:
        _file_type.reset(type_token)
        _file_name.reset(name_token)
