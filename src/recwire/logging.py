"""Structured logging for recwire.

The codec logs through structlog. Applications decide where output goes by
calling ``configure_logging`` once at startup; library modules only obtain
loggers through ``get_logger``.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

# Silent until the application configures output
logging.getLogger("recwire").addHandler(logging.NullHandler())


def configure_logging(
    *,
    level: str = "WARNING",
    json_format: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Route structlog through stdlib logging with console or JSON rendering.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR)
        json_format: Render events as JSON lines instead of console text
        stream: Output stream (default stderr)

    Raises:
        ValueError: If level is not a known level name
    """
    try:
        log_level = _LEVEL_MAP[level.upper()]
    except KeyError as err:
        raise ValueError(f"Unknown log level: {level}") from err

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    renderer: structlog.types.Processor
    if json_format:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False, pad_event_to=0)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(log_level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=shared_processors,
        )
    )

    package_logger = logging.getLogger("recwire")
    package_logger.handlers.clear()
    package_logger.addHandler(handler)
    package_logger.setLevel(log_level)
    package_logger.propagate = False


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger backed by the stdlib logger ``name``.

    Processors and filtering are looked up from the structlog configuration
    on use, so loggers created at import time follow a later
    ``configure_logging``.
    """
    logger = structlog.wrap_logger(logging.getLogger(name or "recwire"))
    return logger  # type: ignore[no-any-return]
