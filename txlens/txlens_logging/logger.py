"""
Structured logging for txlens on top of structlog.

Every record carries an ISO timestamp, the level, the emitting module
(``logger``) and an ``event_type``: the snake_case first argument of the
log call. Parser code adds the transaction signature and instruction index
as keyword context.

LOG_LEVEL selects the minimum level, LOG_FORMAT=json (default) or console
selects the renderer. Records go to stderr so stdout stays free for
rendered transaction output.

Imports nothing else from txlens, so any module may import it.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog

DEFAULT_LEVEL = "INFO"
DEFAULT_FORMAT = "json"

# Context values longer than this are cut in log output (raw payloads, data blobs)
MAX_VALUE_LENGTH = 200


def _truncate_long_values(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    for key, value in event_dict.items():
        if isinstance(value, str) and len(value) > MAX_VALUE_LENGTH:
            event_dict[key] = value[:MAX_VALUE_LENGTH] + "..."
    return event_dict


def _renderer(fmt: str) -> Any:
    if fmt == "console":
        return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    return structlog.processors.JSONRenderer(sort_keys=True)


def configure_structlog(level: str | None = None, fmt: str | None = None) -> None:
    """
    (Re)configure structlog for txlens.

    Arguments default to LOG_LEVEL / LOG_FORMAT from the environment. Safe
    to call again, e.g. from a CLI after parsing --verbose.
    """
    level_name = (level or os.getenv("LOG_LEVEL") or DEFAULT_LEVEL).strip().upper()
    fmt = (fmt or os.getenv("LOG_FORMAT") or DEFAULT_FORMAT).strip().lower()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.EventRenamer("event_type"),
            _truncate_long_values,
            _renderer(fmt),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level_name, logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Return a structured logger bound to the module name.

        logger = get_logger(__name__)
        logger.warning("instruction_decode_failed", signature=sig, index=2, error="...")

    JSON output: {"error": "...", "event_type": "instruction_decode_failed", "index": 2,
    "level": "warning", "logger": "txlens.parser.parser", "signature": "...", "timestamp": "..."}
    """
    return structlog.get_logger(name).bind(logger=name)


def bind_signature(signature: str) -> structlog.BoundLogger:
    """Logger with the transaction signature bound to every subsequent call."""
    return get_logger("txlens").bind(signature=signature)
