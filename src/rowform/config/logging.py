"""structlog configuration for rowform.

Library modules log through stdlib ``logging.getLogger(__name__)``; the
root handler installed here renders those records through structlog, so
form events and CLI events share one format.

Two output modes:
- Human (default): console renderer to stderr, colored on a TTY
- JSON (--log-json): one JSON object per line on stderr

CLI commands bind the rows file they work on with :func:`bind_source`;
every log line emitted while handling that file carries a ``source`` key.
"""

from __future__ import annotations

import logging
import sys

import structlog

PACKAGE_LOGGER = "rowform"

_SHARED_PROCESSORS: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
]


def _renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
) -> None:
    """Route stdlib and structlog output to a single stderr handler.

    Args:
        verbose: DEBUG for the ``rowform`` logger (every mutation is logged);
            otherwise WARNING, which leaves only rejected and failed submits.
        log_json: JSON lines instead of the console renderer.

    Safe to call repeatedly; the root handler is replaced, not stacked.
    """
    structlog.configure(
        processors=[
            *_SHARED_PROCESSORS,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_SHARED_PROCESSORS,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json),
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def bind_source(source: str) -> None:
    """Tag subsequent log lines with the rows file being processed."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(source=source)
