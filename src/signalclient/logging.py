"""Structured logging setup and the debug sink used for HTTP dumps."""

from __future__ import annotations

import logging
import sys
from typing import Protocol

import structlog


class DebugLogger(Protocol):
    """Anything accepting a formatted debug string; structlog loggers qualify."""

    def debug(self, event: str) -> object: ...


def configure_logging(level: str = "INFO", json: bool = False) -> None:
    """Configure structlog for command-line use."""
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=log_level, stream=sys.stderr, format="%(message)s")

    renderer = structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def http_debug_logger() -> DebugLogger:
    return structlog.get_logger("signalclient.http")
