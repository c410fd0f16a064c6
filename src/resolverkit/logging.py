"""
Centralized logging configuration using structlog
"""

import logging
import secrets
import sys
from contextvars import ContextVar
from typing import Any

import structlog

# Context variables for resolver call tracking
resolver_name_ctx: ContextVar[str | None] = ContextVar("resolver_name", default=None)
operation_id_ctx: ContextVar[str | None] = ContextVar("operation_id", default=None)


class ResolverContextFilter:
    """Add resolver call context to log records."""

    def __call__(self, logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        """Add resolver context to the event dict."""
        # Required by the structlog processor interface
        _ = logger, method_name

        resolver_name = resolver_name_ctx.get()
        operation_id = operation_id_ctx.get()

        if resolver_name:
            event_dict.setdefault("resolver", resolver_name)

        if operation_id:
            event_dict.setdefault("operation_id", operation_id)

        return event_dict


def configure_logging(debug: bool = False, log_level: str | None = None) -> None:
    """Configure structlog with appropriate processors and formatters.

    Args:
        debug: If True, use human-readable console output. If False, use JSON.
        log_level: Explicit level name; overrides the level implied by ``debug``.
    """
    if log_level is not None:
        level = logging.getLevelName(log_level.upper())
    else:
        level = logging.DEBUG if debug else logging.INFO

    logging.basicConfig(
        level=level,
        stream=sys.stdout,
        format="%(message)s",
        force=True,
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        ResolverContextFilter(),
        structlog.processors.TimeStamper(fmt="ISO", utc=True),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if debug:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


def generate_operation_id() -> str:
    """Generate a short random id used to correlate the log lines of one resolve call."""
    return secrets.token_urlsafe(8)


def set_resolver_context(resolver_name: str, operation_id: str | None = None) -> tuple[Any, Any]:
    """Bind the resolver name and an operation id for the current task.

    Returns:
        Tokens to pass to ``reset_resolver_context``
    """
    if operation_id is None:
        operation_id = operation_id_ctx.get() or generate_operation_id()

    return resolver_name_ctx.set(resolver_name), operation_id_ctx.set(operation_id)


def reset_resolver_context(tokens: tuple[Any, Any]) -> None:
    """Restore the resolver context that was active before ``set_resolver_context``."""
    name_token, operation_token = tokens
    resolver_name_ctx.reset(name_token)
    operation_id_ctx.reset(operation_token)


def get_resolver_name() -> str | None:
    """Get the name of the resolver currently executing."""
    return resolver_name_ctx.get()


def get_operation_id() -> str | None:
    """Get the current operation id."""
    return operation_id_ctx.get()
