"""
Exception handling utilities for batch processing.

This package provides:
- Custom exception classes raised by the batch engine
- Utility functions for logging and summarising exceptions

The package is organized into focused modules:
- custom_exceptions: All custom exception classes
- context: Error logging and summary functions
"""

from .context import (
    format_exception_chain,
    get_error_summary,
    log_exception,
)
from .custom_exceptions import (
    BaseBatchError,
    InvalidConfigurationError,
)

__all__ = [
    # Exception classes
    "BaseBatchError",
    "InvalidConfigurationError",
    # Functions
    "log_exception",
    "format_exception_chain",
    "get_error_summary",
]
