"""
Structured logging configuration.

Uses structlog on top of the standard library handlers, so that uvicorn and
httpx records end up in the same stream.
"""
import logging
import sys

import structlog


def setup_logging(level: str = "INFO", app_env: str = "dev") -> None:
    """
    Configure structlog once per process.

    Args:
        level: Logging level name
        app_env: Console rendering in ``dev``, JSON everywhere else
    """
    renderer = (
        structlog.dev.ConsoleRenderer()
        if app_env == "dev"
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )
