"""Centralized logging configuration for simgraph."""

from __future__ import annotations

import logging
import os
from typing import Iterable, Optional, TextIO

from simgraph.config.defaults import ENV_LOG_LEVEL
from simgraph.messaging import MessageFormatterAdapter, get_formatter

DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


def configure_logging(
    *,
    level: str | None = None,
    style: str | None = None,
    format: str = DEFAULT_FORMAT,
    datefmt: str = DEFAULT_DATEFMT,
    stream: Optional[TextIO] = None,
    extra_loggers: Iterable[str] | None = None,
) -> logging.Logger:
    """Configure application logging with sensible defaults.

    Args:
        level: Optional explicit log level. Falls back to ``SIMGRAPH_LOG_LEVEL``
            env var or INFO when not provided.
        style: None for a plain ``format`` string, or a message style
            ("default", "clang") rendered through MessageFormatterAdapter.
        format: Log format string used when ``style`` is None.
        datefmt: Date format string.
        stream: Stream for the root handler (stderr by default).
        extra_loggers: Additional logger names to align with the configured level.

    Returns:
        The package logger (``simgraph``).
    """
    raw_level = level if level is not None else os.getenv(ENV_LOG_LEVEL)
    resolved_level = (raw_level or "INFO").upper()

    handler = logging.StreamHandler(stream)
    if style is None:
        handler.setFormatter(logging.Formatter(format, datefmt))
    else:
        handler.setFormatter(MessageFormatterAdapter(get_formatter(style)))
    logging.basicConfig(level=resolved_level, handlers=[handler], force=True)

    app_logger = logging.getLogger("simgraph")
    app_logger.setLevel(resolved_level)

    if extra_loggers:
        for logger_name in extra_loggers:
            logging.getLogger(logger_name).setLevel(resolved_level)

    app_logger.debug("Logging configured", extra={"level": resolved_level, "style": style})
    return app_logger
