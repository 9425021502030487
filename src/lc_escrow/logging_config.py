"""Structured logging for the LC escrow using structlog.

Ledger events are logged as dotted names (``lc.created``, ``lc.cancelled``,
``payment.transfer_completed``) with the lc id, parties and amounts as
key-value pairs. Development renders them as colored console lines;
every other environment emits one JSON object per line.

Entries written while serving HTTP also carry the request_id bound by
RequestIDMiddleware, and every entry carries ``service="lc-escrow"``.

Usage:
    from lc_escrow.logging_config import setup_logging, get_logger
    setup_logging(log_level="INFO", json_logs=True)
    logger = get_logger(__name__)
    logger.info("lc.created", lc_id=1, amount=1000)
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

SERVICE_NAME = "lc-escrow"

# Uvicorn's per-request access lines duplicate the request_id-tagged entries
_QUIET_LOGGERS = ("uvicorn.access",)


def _add_service(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def setup_logging(
    log_level: str = "DEBUG",
    json_logs: bool = False,
    echo_sql: bool = False,
) -> None:
    """Route stdlib and structlog output through one structlog formatter.

    Args:
        log_level: Root log level name (DEBUG, INFO, WARNING, ...).
        json_logs: Emit JSON lines instead of the colored console renderer.
        echo_sql: Keep SQLAlchemy's statement log at INFO instead of WARNING.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        _add_service,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    renderer: structlog.types.Processor
    if json_logs:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.DEBUG))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if echo_sql else logging.WARNING
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger, named after the calling module when given."""
    return structlog.get_logger(name)
