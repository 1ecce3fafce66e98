"""
Logging utilities for batch processing runs.

This package provides logging configuration with support for:
- Consistent formatting across the engine and its callers
- File logging with rotation
- JSON logging for production environments

Public API:
- get_logger: Get a configured logger instance
- setup_logging: Configure global logging settings
- basic_config: Quick logging setup for scripts
- JSONFormatter: Custom JSON formatter for structured logging
- DEFAULT_FORMAT: Default logging format string
- DEFAULT_DATE_FORMAT: Default date format string
"""

from .formatters import JSONFormatter
from .logger import (
    DEFAULT_DATE_FORMAT,
    DEFAULT_FORMAT,
    basic_config,
    get_logger,
    setup_logging,
)

__all__ = [
    # Core logger functions
    'get_logger',
    'setup_logging',
    'basic_config',

    # Formatters
    'JSONFormatter',

    # Constants
    'DEFAULT_FORMAT',
    'DEFAULT_DATE_FORMAT',
]
