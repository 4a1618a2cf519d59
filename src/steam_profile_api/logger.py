"""
Structured logging configuration using structlog.

JSON lines for hosted deployments, coloured console output for local
runs. The Steam Web API takes its key as a query parameter, so every
log path that may carry a request URL goes through key redaction.
"""

import logging
import re
import sys
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from structlog.types import EventDict, Processor, WrappedLogger

from steam_profile_api.config import LoggingConfig

_API_KEY_PARAM = re.compile(r"([?&]key=)[^&\s\"']+", re.IGNORECASE)


def redact(text: str) -> str:
    """Mask the value of any ``key=`` query parameter in ``text``."""
    return _API_KEY_PARAM.sub(r"\1***", text)


def redact_api_key(logger: "WrappedLogger", method_name: str, event_dict: "EventDict") -> "EventDict":
    """structlog processor applying :func:`redact` to string values."""
    for name, value in event_dict.items():
        if isinstance(value, str) and "key=" in value:
            event_dict[name] = redact(value)
    return event_dict


class RedactingFilter(logging.Filter):
    """Same masking for stdlib records (httpx logs full request URLs)."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        if "key=" in message:
            record.msg = redact(message)
            record.args = None
        return True


def _processors(config: LoggingConfig) -> list["Processor"]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        redact_api_key,
    ]
    if config.include_timestamp:
        processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if config.format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=sys.stdout.isatty(),
                exception_formatter=structlog.dev.plain_traceback,
            )
        )
    return processors


def setup_logging(config: LoggingConfig | None = None) -> None:
    """
    Configure structlog and the standard library root logger.

    Args:
        config: Logging section (read from the environment if None).
            Logging is set up before the Steam credentials are checked,
            so this only needs the LOG_* variables.
    """
    config = config or LoggingConfig()
    level = logging.getLevelName(config.level)

    structlog.configure(
        processors=_processors(config),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # uvicorn and httpx log through the standard library
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, RedactingFilter) for f in handler.filters):
            handler.addFilter(RedactingFilter())


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.BoundLogger:
    """
    Get a logger, optionally with context bound up front.

    Example:
        >>> logger = get_logger(__name__, component="aggregator")
        >>> logger.info("Fetching games", user_id="76561197960287930")
    """
    logger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger
