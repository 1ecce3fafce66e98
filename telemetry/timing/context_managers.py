"""
Timing context managers for performance measurement.

Context managers for timing code blocks, with logging, usable in both
synchronous and asynchronous code.
"""

import logging
import time
from typing import Any, Optional

from ..logging import get_logger

# Default logger for timing operations
logger = get_logger(__name__)


class TimingContext:
    """
    Context manager for timing code blocks with logging.

    Works around ``await`` expressions as well, since it only reads the clock
    on enter and exit.

    Attributes:
        name: Name of the operation being timed
        logger: Logger instance for output
        level: Logging level for timing messages
        threshold_ms: Only log if execution exceeds this threshold
        start_time: Start time of the operation
        elapsed_ms: Elapsed time in milliseconds (available after exit)

    Example:
        >>> with TimingContext("batch 1/4", level=logging.DEBUG) as timer:
        ...     outcomes = await run_group(group)
        >>> timer.elapsed_ms
    """

    def __init__(
        self,
        name: str,
        logger_instance: Optional[logging.Logger] = None,
        level: int = logging.INFO,
        threshold_ms: Optional[float] = None
    ):
        self.name = name
        self.logger = logger_instance or logger
        self.level = level
        self.threshold_ms = threshold_ms
        self.start_time: Optional[float] = None
        self.elapsed_ms: Optional[float] = None

    def __enter__(self) -> "TimingContext":
        self.start_time = time.perf_counter()
        self.logger.log(self.level, f"Starting {self.name}")
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self.start_time is None:
            return
        self.elapsed_ms = (time.perf_counter() - self.start_time) * 1000

        if exc_type is not None:
            self.logger.error(
                f"{self.name} failed after {self.elapsed_ms:.2f} ms: "
                f"{exc_type.__name__}: {str(exc_val)}"
            )
        elif self.threshold_ms is None or self.elapsed_ms >= self.threshold_ms:
            self.logger.log(
                self.level,
                f"{self.name} completed in {self.elapsed_ms:.2f} ms"
            )
