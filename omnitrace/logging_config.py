"""
Log output for the omnitrace CLI.

Package modules log through stdlib loggers. setup_logging() attaches one
stderr handler whose structlog ProcessorFormatter renders those records as
console lines, or as JSON lines when OMNITRACE_LOG_FORMAT=json. Stdout is
left to the CLI's JSON results.
"""

from __future__ import annotations

import logging
import os
import sys

import structlog


LEVEL_ENV = "OMNITRACE_LOG_LEVEL"
FORMAT_ENV = "OMNITRACE_LOG_FORMAT"
DEFAULT_LEVEL = logging.WARNING


def _level_number(name: str) -> int:
    return logging.getLevelNamesMapping().get(name.upper(), DEFAULT_LEVEL)


def setup_logging(level: str | None = None, json_output: bool | None = None) -> None:
    """Replace the root handlers. Arguments override the environment."""
    level = level or os.environ.get(LEVEL_ENV, "WARNING")
    if json_output is None:
        json_output = os.environ.get(FORMAT_ENV, "").lower() == "json"

    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer(colors=False)
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
        ],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(_level_number(level))


__all__ = ["setup_logging"]
