"""Diagnostic sinks — where skipped-file messages go.

Filters decide *whether* to report (``debug`` / ``verbose``); a sink only
decides *where* the text ends up.  Nothing a sink does feeds back into
filtering.
"""

from __future__ import annotations

import logging
from typing import Protocol

from rich.console import Console

_logger = logging.getLogger(__name__)


class DiagnosticSink(Protocol):
    """Anything that accepts a human-readable diagnostic line."""

    def emit(self, message: str, *, style: str | None = None) -> None:
        ...


class NullSink:
    """Discards every message."""

    def emit(self, message: str, *, style: str | None = None) -> None:
        return None


class LoggingSink:
    """Forwards messages to a ``logging.Logger`` at DEBUG level."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or _logger

    def emit(self, message: str, *, style: str | None = None) -> None:
        self.logger.debug("%s", message)


class ConsoleSink:
    """Prints messages to a rich ``Console`` (stderr unless one is given)."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(stderr=True)

    def emit(self, message: str, *, style: str | None = None) -> None:
        # Paths may contain "[...]": never interpret them as markup.
        self.console.print(message, style=style, markup=False, highlight=False)


class RecordingSink:
    """Keeps messages in memory, in emission order."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def emit(self, message: str, *, style: str | None = None) -> None:
        self.messages.append(message)


def default_sink(*, debug: bool = False, verbose: bool = False) -> DiagnosticSink:
    """Console output when a diagnostic flag is set, silence otherwise."""
    if debug or verbose:
        return ConsoleSink()
    return NullSink()


__all__ = [
    "ConsoleSink",
    "DiagnosticSink",
    "LoggingSink",
    "NullSink",
    "RecordingSink",
    "default_sink",
]
