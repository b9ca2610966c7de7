#!/usr/bin/env python3
"""
Structured Logging Module using structlog

This module provides structured logging with:
- Request ID correlation (one id per inbound HTTP request)
- JSON formatting for log aggregation, console rendering for development
- Redaction of bearer/access tokens that may appear in messages
"""

import logging
import re
import sys
from contextvars import ContextVar
from datetime import datetime, timezone

import structlog
from structlog.types import EventDict, WrappedLogger

from protocol_server.core.config.settings import get_settings

# Context variable for the current request id
request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)

_BEARER_PATTERN = re.compile(r"\bBearer\s+[A-Za-z0-9._~+/=-]+", re.IGNORECASE)
_ACCESS_TOKEN_PATTERN = re.compile(r"(access_token[\"']?\s*[:=]\s*[\"']?)[^\s\"',}]+")


def add_request_id(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Add request ID to log event from context variable.

    STAGE-L.1: Request ID injection
    """
    request_id = request_id_ctx.get()
    if request_id:
        event_dict.setdefault("request_id", request_id)
    return event_dict


def add_timestamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Add ISO timestamp to log event.

    STAGE-L.2: Timestamp injection
    """
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def redact_tokens(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Redact credentials from log messages.

    STAGE-L.3: Token redaction

    Patterns redacted:
    - ``Bearer <token>`` → ``Bearer [REDACTED]``
    - ``access_token=<value>`` / ``"access_token": "<value>"`` → value replaced
    - an ``access_token`` keyword passed as log context
    """
    message = event_dict.get("event", "")

    if isinstance(message, str):
        message = _BEARER_PATTERN.sub("Bearer [REDACTED]", message)
        message = _ACCESS_TOKEN_PATTERN.sub(r"\1[REDACTED]", message)
        event_dict["event"] = message

    if event_dict.get("access_token"):
        event_dict["access_token"] = "[REDACTED]"

    return event_dict


def add_log_level_name(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Add log level name to event dict.

    STAGE-L.4: Log level injection
    """
    if "level" in event_dict:
        event_dict["level"] = event_dict["level"].upper()
    return event_dict


def setup_logging(log_level: str | None = None, log_format: str | None = None) -> None:
    """
    Setup structured logging with structlog.

    STAGE-L: Logging initialization

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log format ('json' or 'console')
    """
    settings = get_settings()

    # Use settings if not provided
    log_level = log_level or settings.logging.LOG_LEVEL
    log_format = log_format or settings.logging.LOG_FORMAT

    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s", stream=sys.stdout, level=getattr(logging, log_level.upper())
    )

    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            add_request_id,
            add_timestamp,
            structlog.stdlib.add_log_level,
            add_log_level_name,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            redact_tokens,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Usage:
        logger = get_logger(__name__)
        logger.info("session_created", session_id="...")
    """
    return structlog.get_logger(name)


def set_request_id(request_id: str) -> None:
    """
    Set request ID in context for current request.

    This should be called at the start of each request to enable
    request ID correlation across all log entries.
    """
    request_id_ctx.set(request_id)


def get_request_id() -> str | None:
    """Get current request ID from context."""
    return request_id_ctx.get()


def clear_request_id() -> None:
    """Clear request ID from context at the end of request processing."""
    request_id_ctx.set(None)
