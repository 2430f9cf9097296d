"""Structured JSON logger for hugoify.

Each record is a single-line JSON object so a batch run can be tailed or
shipped to a log pipeline without extra parsing::

    {"ts": "2026-01-05T09:30:00.120000+00:00", "level": "WARNING",
     "logger": "hugoify.assembler", "message": "page skipped",
     "op": "convert", "page_id": "abc123", "unmapped": ["Life"]}

Usage::

    from hugoify.observability import get_logger, log_event

    log = get_logger("hugoify.media")
    log_event(log, logging.DEBUG, "media saved", url=url, local_url=local)
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any


class StructuredFormatter(logging.Formatter):
    """Format log records as single-line JSON objects.

    Guaranteed keys are ``ts``, ``level``, ``logger`` and ``message``.
    Fields passed as ``extra={"extra_fields": {...}}`` are merged into the
    top-level object; exception and stack info are serialised when present.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra_fields: dict[str, Any] | None = getattr(
            record, "extra_fields", None
        )
        if extra_fields is not None:
            log_entry.update(extra_fields)

        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)

        if record.stack_info:
            log_entry["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(log_entry, default=str, ensure_ascii=False)


# One handler per root name so repeated ``get_logger`` calls stay idempotent.
_configured_loggers: set[str] = set()


def get_logger(
    name: str = "hugoify",
    *,
    level: int | str = logging.INFO,
    stream: Any | None = None,
) -> logging.Logger:
    """Get or create a structured JSON logger.

    Only the top-level ``"hugoify"`` logger receives a handler; child names
    such as ``"hugoify.media"`` propagate to it.

    Parameters
    ----------
    name:
        Logger name.  Defaults to ``"hugoify"``.
    level:
        Level applied to the root ``"hugoify"`` logger on first
        configuration.  Accepts an ``int`` or a case-insensitive string.
    stream:
        Output stream for the handler.  Defaults to ``sys.stderr``.

    Returns
    -------
    logging.Logger
    """
    root_name = name.split(".", 1)[0]
    root = logging.getLogger(root_name)

    if root_name not in _configured_loggers:
        resolved_level = (
            logging.getLevelName(level.upper())
            if isinstance(level, str)
            else level
        )
        root.setLevel(resolved_level)

        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(StructuredFormatter())
        root.addHandler(handler)
        root.propagate = False

        _configured_loggers.add(root_name)

    return logging.getLogger(name)


def log_event(logger: logging.Logger, level: int, message: str, **fields: Any) -> None:
    """Emit *message* with *fields* attached as structured ``extra_fields``."""
    logger.log(level, message, extra={"extra_fields": fields})
