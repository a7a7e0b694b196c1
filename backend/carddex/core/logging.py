"""
Structured logging for the progression service.

Modules log through structlog.get_logger() with key-value events; this
module only decides how those events are rendered.
"""
import logging
import sys
from typing import Optional

import structlog

from carddex.core.config import settings

# Libraries that log every statement at INFO
_NOISY_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "asyncio")


def setup_logging(debug: Optional[bool] = None) -> None:
    """
    Configure structlog and the standard logging module.

    Args:
        debug: Console output at DEBUG level; defaults to settings.api_debug.
            Otherwise JSON lines at INFO level.
    """
    debug = settings.api_debug if debug is None else debug
    log_level = logging.DEBUG if debug else logging.INFO

    renderer = (
        structlog.dev.ConsoleRenderer()
        if debug
        else structlog.processors.JSONRenderer()
    )
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if not debug:
        processors.append(structlog.processors.format_exc_info)
    processors.append(renderer)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.INFO if debug else logging.WARNING)
