"""structlog configuration for clipsan.

Two output modes:
- Human (default): console-rendered lines
- JSON (--log-json): Structured JSON lines

Output goes to stderr unless a log file is given. A full-screen terminal
host owns the screen, so embedding applications normally pass ``log_file``.
Pasted text itself is never logged, only sizes and rule names.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import structlog


def _add_component(
    logger: object, method_name: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    """Tag events from ``clipsan.services.burst`` etc. with ``component=burst``."""
    name = event_dict.get("logger", "")
    if isinstance(name, str) and name.startswith("clipsan."):
        event_dict.setdefault("component", name.rsplit(".", 1)[-1])
    return event_dict


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _add_component,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    log_file: Path | None = None,
) -> None:
    """Configure structlog processors and output routing.

    Safe to call repeatedly; the root handler is replaced, never stacked.

    Args:
        verbose: Enable DEBUG-level output for ``clipsan.*``. When False, only WARNING+.
        log_json: Use JSON renderer instead of console renderer.
        log_file: Append to this file instead of writing to stderr.
    """
    shared_processors = _shared_processors()

    if log_file is not None:
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
        colors = False
    else:
        handler = logging.StreamHandler(sys.stderr)
        colors = sys.stderr.isatty()

    if log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=colors)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

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
    for old in root_logger.handlers:
        if isinstance(old, logging.FileHandler):
            old.close()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger("clipsan").setLevel(logging.DEBUG if verbose else logging.WARNING)
