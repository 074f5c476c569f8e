"""Structured logging setup.

Mirrors the structlog pipeline used by the service entry points: stdlib
logging is the sink, so Lambda's CloudWatch handler picks the lines up,
and structlog renders each event as one JSON object.

Usage:
    from dbinit.monitoring.logging import configure_logging

    configure_logging(level="INFO", fmt="json")
    logger = structlog.get_logger(__name__)
    logger.info("bootstrap_started", statements=8)
"""

import logging
import sys

import structlog

_configured: tuple[str, str] | None = None


def configure_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Configure structlog and the root stdlib logger.

    Safe to call on every invocation; reconfigures only when the
    level or format changes.
    """
    global _configured
    if _configured == (level, fmt):
        return

    renderer = (
        structlog.dev.ConsoleRenderer(colors=False)
        if fmt == "console"
        else structlog.processors.JSONRenderer()
    )

    root = logging.getLogger()
    if not root.handlers:
        root.addHandler(logging.StreamHandler(sys.stdout))
    root.setLevel(level)

    structlog.configure(
        processors=[
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
        cache_logger_on_first_use=False,
    )
    _configured = (level, fmt)
