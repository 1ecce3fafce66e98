"""
Batch processing with bounded concurrency.

Items are split into batches of ``batch_size``; the items of one batch run
concurrently and batches run one after another, with optional per-item
retries, per-attempt timeouts, pacing between batches and progress reports.

The library's loggers (``batch_process.*`` and ``telemetry.*``) write to
stdout through their own handlers and do not propagate. Call
``telemetry.logging.setup_logging()`` to route them through the root logger
instead, or raise their level to silence retry and timeout warnings.

Example:
    >>> from batch_process import batch_process
    >>> await batch_process([1, 2, 3], fetch, batch_size=2)
    [[r1, r2], [r3]]
"""

__version__ = "1.0.0"

from telemetry.exceptions import BaseBatchError, InvalidConfigurationError
from telemetry.resilience import Attempt, BackoffStrategy, OperationTimeoutError

from .config import BatchOptions, RetryPolicy, resolve_options
from .engine import batch_process
from .models import Err, Ok, Outcome
from .partition import partition

__all__ = [
    # Entry points
    "batch_process",
    "partition",
    # Options
    "BatchOptions",
    "RetryPolicy",
    "BackoffStrategy",
    "resolve_options",
    # Outcomes
    "Ok",
    "Err",
    "Outcome",
    "Attempt",
    # Errors
    "BaseBatchError",
    "InvalidConfigurationError",
    "OperationTimeoutError",
]
