"""Logging configuration using loguru.

Resolution steps log through loguru directly; records from stdlib loggers are
forwarded so the launcher has a single stderr sink.  With ``serialize`` the
sink writes one JSON document per line for log collectors.
"""

from __future__ import annotations

import logging
import sys

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


_LOGURU_LEVELS = frozenset({"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"})


class _StdlibForwarder(logging.Handler):
    """Re-emit stdlib records through loguru at the caller's frame."""

    def emit(self, record: logging.LogRecord) -> None:
        level: str | int = record.levelname if record.levelname in _LOGURU_LEVELS else record.levelno

        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame, depth = frame.f_back, depth + 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(level: str = "INFO", *, serialize: bool = False) -> None:
    """Make loguru's stderr sink the only log destination.

    Call once at process startup, before any engine is resolved.
    """
    level = level.upper()

    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT, serialize=serialize)
    logging.basicConfig(handlers=[_StdlibForwarder()], level=0, force=True)

    logger.debug("Logging initialised (level={}, serialize={})", level, serialize)
