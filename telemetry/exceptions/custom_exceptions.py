"""
Custom exception classes for batch processing.

This module defines the exception hierarchy raised by the batch engine itself.
Exceptions raised by caller-supplied workers are never wrapped; they reach the
caller unchanged.
"""

from typing import Any, Dict, Optional


class BaseBatchError(Exception):
    """Base exception class for all batch processing errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize the base exception.

        Args:
            message: Error message
            details: Additional error details as a dictionary
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return formatted error message with details."""
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class InvalidConfigurationError(BaseBatchError):
    """Exception raised when a batch option has an unusable value."""

    def __init__(self, message: str, field: Optional[str] = None,
                 value: Any = None, **kwargs: Any):
        """
        Initialize configuration error.

        Args:
            message: Error message
            field: Option that failed validation
            value: The invalid value
            **kwargs: Additional error details
        """
        details = {"field": field, "value": value}
        details.update(kwargs)
        super().__init__(message, details)
        self.field = field
        self.value = value


__all__ = [
    'BaseBatchError',
    'InvalidConfigurationError',
]
