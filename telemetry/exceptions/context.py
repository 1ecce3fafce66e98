"""
Error context and logging helpers for exception handling.

Utilities for logging exceptions and turning them into plain dictionaries
that can be attached to outcomes or emitted as structured log records.
"""

import logging
import traceback
from typing import Any, Dict, Optional

from .custom_exceptions import BaseBatchError

from ..logging import get_logger

# Module logger
logger = get_logger(__name__)


def log_exception(
    exc: BaseException,
    logger_instance: Optional[logging.Logger] = None,
    level: int = logging.ERROR,
    include_traceback: bool = True,
    extra_context: Optional[Dict[str, Any]] = None
) -> None:
    """Log an exception with full context."""
    log = logger_instance or logger

    exc_info: Dict[str, Any] = {
        "type": type(exc).__name__,
        "message": str(exc),
        "module": type(exc).__module__
    }

    if isinstance(exc, BaseBatchError):
        exc_info["details"] = exc.details

    if extra_context:
        exc_info["context"] = extra_context

    # exc_info must be the exception itself: this is usually called outside
    # the except block that caught it
    if include_traceback:
        log.log(level, f"Exception occurred: {exc_info}", exc_info=exc)
    else:
        log.log(level, f"Exception occurred: {exc_info}")


def format_exception_chain(exc: BaseException, max_depth: int = 10) -> str:
    """Format an exception chain showing all causes."""
    parts = []
    current_exc: Optional[BaseException] = exc
    depth = 0

    while current_exc and depth < max_depth:
        exc_type = type(current_exc).__name__
        exc_msg = str(current_exc)

        if isinstance(current_exc, BaseBatchError) and current_exc.details:
            details_str = ", ".join(f"{k}={v}" for k, v in current_exc.details.items())
            parts.append(f"{exc_type}: {current_exc.message} ({details_str})")
        else:
            parts.append(f"{exc_type}: {exc_msg}")

        current_exc = current_exc.__cause__ or current_exc.__context__
        depth += 1

    return " -> ".join(parts)


def get_error_summary(exc: BaseException) -> Dict[str, Any]:
    """Get a summary of an exception suitable for logging or reports."""
    summary: Dict[str, Any] = {
        "error_type": type(exc).__name__,
        "error_message": str(exc),
        "error_module": type(exc).__module__
    }

    if isinstance(exc, BaseBatchError):
        summary["details"] = exc.details

    if exc.__cause__ is not None:
        summary["caused_by"] = format_exception_chain(exc.__cause__)

    # Last frame only, for brevity
    tb = traceback.extract_tb(exc.__traceback__)
    if tb:
        last_frame = tb[-1]
        summary["location"] = {
            "file": last_frame.filename,
            "line": last_frame.lineno,
            "function": last_frame.name
        }

    return summary


__all__ = [
    'log_exception',
    'format_exception_chain',
    'get_error_summary',
]
