"""
Logging utilities.

Provides:
- configure_logging: structlog + stdlib logging setup from GuardSettings
- guard_context: binds the guarded operation name for log correlation
- add_guard_context: structlog processor adding that name to every event

Usage:
    from resource_guard.utils.logging import configure_logging

    configure_logging()  # reads GUARD_LOG_LEVEL / GUARD_LOG_FORMAT

The context below is used for log correlation only; it never carries
security information.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator, Optional

import structlog

from resource_guard.config import GuardSettings, get_settings


# ============================================================
# CONTEXT VARIABLES
# ============================================================

_guarded_operation: ContextVar[Optional[str]] = ContextVar("guarded_operation", default=None)


def get_guarded_operation() -> Optional[str]:
    """Get the operation currently being guarded, if any."""
    return _guarded_operation.get()


@contextmanager
def guard_context(operation: Optional[str]) -> Iterator[None]:
    """
    Bind the guarded operation name for the duration of a check.

    Usage:
        with guard_context("ProjectService.get_project"):
            logger.info("Guarding")  # event carries operation=...
    """
    token = _guarded_operation.set(operation)
    try:
        yield
    finally:
        _guarded_operation.reset(token)


# ============================================================
# STRUCTLOG PROCESSOR
# ============================================================

def add_guard_context(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Structlog processor that adds the guarded operation to all logs."""
    operation = get_guarded_operation()
    if operation and "operation" not in event_dict:
        event_dict["operation"] = operation
    return event_dict


# ============================================================
# CONFIGURATION
# ============================================================

def configure_logging(settings: GuardSettings | None = None) -> None:
    """
    Configure structlog and the stdlib root logger.

    JSON output for log_format="json", console output otherwise.
    """
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )

    if settings.log_format == "json":
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            add_guard_context,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )
