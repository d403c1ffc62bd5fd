"""Structured logging for fetch and health check runs.

Log lines are JSON on stderr; stdout is reserved for the console summary so
it can be piped or diffed independently of the logs.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor


def add_log_level(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Add log level to event dictionary."""
    event_dict["level"] = method_name.upper()
    return event_dict


def configure_logging(log_level: str = "INFO") -> None:
    """Route structlog through stdlib logging, rendering JSON to stderr.

    Args:
        log_level: DEBUG, INFO, WARNING or ERROR; unknown names fall back to INFO
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=numeric_level, force=True)
    logging.getLogger().setLevel(numeric_level)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def bind_run_context(command: str, volume_id: str) -> None:
    """Attach the command and volume id to every log line of this run.

    Any context left over from a previous run in the same process is cleared.
    """
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(command=command, volume_id=volume_id)
