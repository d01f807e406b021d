"""Logging for the Jira MCP server.

Logs go to stderr; stdout carries the MCP stdio stream. Records emitted while
a tool is being served are tagged with its name through ``tool_context``, and
every tool operation ends with one outcome record from ``log_outcome``.
"""

import json
import logging
import sys
import time
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Iterator

# Per-call attributes, in the order they appear in an entry
TOOL_FIELDS = ("tool_name", "operation", "outcome", "error_kind", "duration_ms")
REQUEST_FIELDS = ("ticket_id", "endpoint", "status_code")

_current_tool: ContextVar[str | None] = ContextVar("jira_mcp_tool", default=None)


@contextmanager
def tool_context(tool_name: str) -> Iterator[None]:
    """Tag every record emitted inside the block with ``tool_name``."""
    token = _current_tool.set(tool_name)
    try:
        yield
    finally:
        _current_tool.reset(token)


class ToolContextFilter(logging.Filter):
    """Fill in ``tool_name`` from the active tool context."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "tool_name", None) is None:
            record.tool_name = _current_tool.get()
        return True


def record_context(record: logging.LogRecord) -> dict[str, Any]:
    context = {}
    for field in TOOL_FIELDS + REQUEST_FIELDS:
        value = getattr(record, field, None)
        if value is not None:
            context[field] = value
    return context


class StructuredFormatter(logging.Formatter):
    """One JSON object per record, with the tool-call context flattened in."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(record_context(record))

        if record.exc_info and record.exc_info[1]:
            entry["error"] = str(record.exc_info[1])
            entry["error_type"] = type(record.exc_info[1]).__name__

        return json.dumps(entry, default=str)


class PlainFormatter(logging.Formatter):
    """Readable single line with the tool-call context as ``key=value`` pairs."""

    def __init__(self) -> None:
        super().__init__("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = record_context(record)
        if not context:
            return line
        pairs = " ".join(f"{key}={value}" for key, value in context.items())
        head, sep, tail = line.partition("\n")
        return f"{head} [{pairs}]{sep}{tail}"


def log_outcome(
    logger: logging.Logger,
    operation: str,
    error_kind: str | None,
    started: float,
    **context: Any,
) -> None:
    """Emit the outcome record for a finished tool operation.

    ``started`` is a ``time.monotonic()`` reading taken when the operation began.
    """
    extra = {
        "operation": operation,
        "outcome": "error" if error_kind else "ok",
        "error_kind": error_kind,
        "duration_ms": round((time.monotonic() - started) * 1000, 1),
        **context,
    }
    if error_kind:
        logger.warning("%s failed (%s)", operation, error_kind, extra=extra)
    else:
        logger.info("%s succeeded", operation, extra=extra)


def configure_logging(level: str = "INFO", json_output: bool = True) -> None:
    """Send the ``jira_mcp`` logger hierarchy to stderr.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        json_output: If True, one JSON object per line. If False, plain text.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    package_logger = logging.getLogger("jira_mcp")
    package_logger.setLevel(log_level)

    if not package_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(log_level)
        handler.addFilter(ToolContextFilter())
        handler.setFormatter(StructuredFormatter() if json_output else PlainFormatter())
        package_logger.addHandler(handler)

    package_logger.propagate = False
