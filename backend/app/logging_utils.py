"""Structlog setup shared by the API process and the CLI entry point."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.contextvars import merge_contextvars
from structlog.typing import Processor

QUIET_LOGGERS = ("httpx", "httpcore")


def use_json_output(environment: str, log_format: str = "") -> bool:
    """JSON when asked for explicitly, otherwise only in production."""
    fmt = log_format.strip().lower()
    if fmt:
        return fmt == "json"
    return environment.strip().lower() == "production"


def build_processors(json_output: bool) -> list[Processor]:
    processors: list[Processor] = [
        merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
    ]
    if json_output:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors += [
            structlog.dev.set_exc_info,
            structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()),
        ]
    return processors


def configure_logging(
    environment: str = "development",
    log_level: str = "INFO",
    log_format: str = "",
) -> None:
    """
    Configure stdlib logging and structlog for the service.

    Console output for local development, JSON lines for production or when
    LOG_FORMAT=json. Safe to call more than once.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(
        format="%(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
        level=level,
        force=True,
    )
    # request lines carry the upstream token in the query string
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=build_processors(use_json_output(environment, log_format)),
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> Any:
    return structlog.get_logger(name)
