"""Structured logging configuration.

Loggers emit JSON lines with an ISO timestamp and the log level so query
events can be filtered by table and operation. Importing the package leaves
structlog's global configuration alone; applications that want this format
call ``configure_logging()`` once at startup.
"""

from __future__ import annotations

from typing import Any

import structlog


def configure_logging() -> None:
    """Install the JSON-lines processor chain as structlog's global config."""
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(),
        ],
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> Any:
    """Return a structured module logger.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A structlog bound logger using whatever configuration is active.
    """
    return structlog.get_logger(name)
