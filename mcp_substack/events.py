"""Diagnostic event log for request lifecycle tracing.

An :class:`EventLog` is created once per process, opened at startup and
closed at shutdown, and handed to the validator, extractor and tool
dispatcher.  Every event becomes one line in an append-only text file::

    [2024-05-01T12:00:00.123456+00:00] DEBUG: fetch.response {"status": 200}

and, optionally, a mirrored line on stderr rendered by ``rich``.  Recording
an event never raises into the caller: handler failures go through
``logging.Handler.handleError`` and an unwritable log file downgrades the
log to stderr only.
"""

from __future__ import annotations

import json
import logging
import sys
import threading
import traceback
from datetime import datetime, timezone
from pathlib import Path
from types import TracebackType
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

from mcp_substack.config import settings

LOGGER_NAME = "mcp_substack"


class EventFormatter(logging.Formatter):
    """Render a record as ``[<iso timestamp>] LEVEL: event {json fields}``."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, timezone.utc).isoformat()
        fields = getattr(record, "fields", None) or {}
        line = f"[{timestamp}] {record.levelname}: {record.getMessage()}"
        if fields:
            line += " " + json.dumps(fields, default=str, ensure_ascii=False)
        return line


class EventLog:
    """Injected logging capability with an explicit open/close lifecycle."""

    def __init__(
        self,
        log_path: Path | None = None,
        *,
        to_stderr: bool | None = None,
        level: str | None = None,
        name: str = LOGGER_NAME,
    ) -> None:
        self.log_path = Path(log_path) if log_path is not None else settings.log_path
        self.to_stderr = settings.log_to_stderr if to_stderr is None else to_stderr
        self.level = logging.getLevelName((level or settings.log_level).upper())
        if not isinstance(self.level, int):
            self.level = logging.DEBUG
        # Unregistered with logging's manager: each log owns its handlers.
        self._logger = logging.Logger(name)
        self._handlers: list[logging.Handler] = []

    @property
    def is_open(self) -> bool:
        return bool(self._handlers)

    def open(self) -> "EventLog":
        """Attach the file and stderr handlers.  Calling twice is a no-op."""
        if self._handlers:
            return self

        self._logger.setLevel(self.level)
        self._logger.propagate = False
        formatter = EventFormatter()

        if self.to_stderr:
            console_handler = RichHandler(
                console=Console(stderr=True),
                show_time=False,
                show_level=False,
                show_path=False,
            )
            console_handler.setFormatter(formatter)
            self._handlers.append(console_handler)

        try:
            self.log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(self.log_path, mode="a", encoding="utf-8")
        except OSError as exc:
            file_handler = None
            file_error = str(exc)
        else:
            file_handler.setFormatter(formatter)
            self._handlers.append(file_handler)

        for handler in self._handlers:
            handler.setLevel(self.level)
            self._logger.addHandler(handler)

        if file_handler is None:
            self._logger.warning(
                "log.file_unavailable",
                extra={"fields": {"path": str(self.log_path), "error": file_error}},
            )
        return self

    def close(self) -> None:
        """Flush and detach every handler opened by :meth:`open`."""
        for handler in self._handlers:
            self._logger.removeHandler(handler)
            handler.flush()
            handler.close()
        self._handlers = []

    def record(self, event: str, **fields: Any) -> None:
        """Append *event* with its *fields* to the log."""
        if not self._handlers:
            return
        self._logger.debug(event, extra={"fields": fields})

    def __enter__(self) -> "EventLog":
        return self.open()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def record_event(events: EventLog | None, event: str, **fields: Any) -> None:
    """Record *event* on *events* when a log was injected."""
    if events is None:
        return
    events.record(event, **fields)


def install_fault_hooks(events: EventLog) -> None:
    """Log uncaught exceptions from the main and worker threads, then carry on."""

    def _excepthook(
        exc_type: type[BaseException],
        exc: BaseException,
        tb: TracebackType | None,
    ) -> None:
        events.record(
            "process.uncaught",
            error=str(exc),
            type=exc_type.__name__,
            stack="".join(traceback.format_exception(exc_type, exc, tb)),
        )

    def _thread_excepthook(args: threading.ExceptHookArgs) -> None:
        _excepthook(args.exc_type, args.exc_value, args.exc_traceback)  # type: ignore[arg-type]

    sys.excepthook = _excepthook
    threading.excepthook = _thread_excepthook


def loop_exception_handler(events: EventLog):
    """Build an asyncio loop exception handler that records instead of crashing."""

    def _handler(loop: Any, context: dict[str, Any]) -> None:
        exc = context.get("exception")
        events.record(
            "process.unhandled_rejection",
            message=context.get("message", ""),
            error=str(exc) if exc else None,
        )

    return _handler
