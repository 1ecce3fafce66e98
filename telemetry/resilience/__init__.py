"""
Resilience utilities for batch processing.

This package provides:
- Retry logic with linear or exponential backoff
- Timeout racing for async operations, without cancelling the loser

The package is organized into focused modules:
- retry: Retry loop and backoff calculation
- timeout: Timeout race and detached-task bookkeeping
"""

# Retry functionality
from .retry import (
    Attempt,
    BackoffStrategy,
    RetryConfig,
    calculate_delay,
    retry_async,
)

# Timeout functionality
from .timeout import (
    OperationTimeoutError,
    detach,
    detached_count,
    race_timeout,
    with_timeout,
)

__all__ = [
    # Retry logic
    "Attempt",
    "BackoffStrategy",
    "RetryConfig",
    "calculate_delay",
    "retry_async",
    # Timeout handling
    "OperationTimeoutError",
    "race_timeout",
    "with_timeout",
    "detach",
    "detached_count",
]
