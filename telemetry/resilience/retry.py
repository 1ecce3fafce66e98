"""Retry logic with linear or exponential backoff."""

import asyncio
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional

from ..logging import get_logger
from .timeout import operation_name, with_timeout

logger = get_logger(__name__)


class BackoffStrategy(str, Enum):
    """Wait policy between two attempts"""
    LINEAR = "linear"
    EXPONENTIAL = "exponential"


@dataclass
class RetryConfig:
    max_attempts: int = 1
    initial_delay: float = 0.1
    max_delay: float = 30.0
    backoff: BackoffStrategy = BackoffStrategy.LINEAR

    def __post_init__(self) -> None:
        # Anything below one attempt still means "call it once"
        if self.max_attempts < 1:
            self.max_attempts = 1
        self.backoff = BackoffStrategy(self.backoff)


@dataclass
class Attempt:
    """One invocation of a retried operation."""
    number: int
    started_at: float
    elapsed: float = 0.0
    error: Optional[BaseException] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


def calculate_delay(attempt: int, config: RetryConfig) -> float:
    """Seconds to wait after failed ``attempt`` (1-based) before the next one."""
    if config.backoff is BackoffStrategy.EXPONENTIAL:
        return min(config.initial_delay * (2 ** (attempt - 1)), config.max_delay)
    return config.initial_delay


async def retry_async(
    func: Callable[..., Any],
    *args: Any,
    config: Optional[RetryConfig] = None,
    timeout: Optional[float] = None,
    on_attempt: Optional[Callable[[Attempt], Any]] = None,
    **kwargs: Any
) -> Any:
    """
    Call ``func(*args, **kwargs)`` until it succeeds or attempts run out.

    Each attempt is raced against ``timeout`` when one is given; a timed-out
    attempt counts as a failure with :class:`OperationTimeoutError`. After the
    last attempt the exception of that attempt is re-raised unchanged.

    Args:
        func: Async callable (a sync callable is accepted too)
        config: Attempt count and backoff policy
        timeout: Per-attempt limit in seconds
        on_attempt: Called with an :class:`Attempt` after every attempt settles

    Returns:
        Whatever the first successful attempt returned
    """
    config = config or RetryConfig()
    name = operation_name(func)
    for number in range(1, config.max_attempts + 1):
        attempt = Attempt(number=number, started_at=time.time())
        started = time.perf_counter()
        try:
            result = await with_timeout(func, timeout, *args, **kwargs)
        except Exception as e:
            attempt.elapsed = time.perf_counter() - started
            attempt.error = e
            if on_attempt is not None:
                on_attempt(attempt)

            if number >= config.max_attempts:
                if config.max_attempts > 1:
                    logger.error(f"{name} failed after {config.max_attempts} attempts: {e}")
                raise

            delay = calculate_delay(number, config)
            logger.warning(f"{name} failed on attempt {number}, retrying in {delay:.2f}s: {e}")
            await asyncio.sleep(delay)
            continue

        attempt.elapsed = time.perf_counter() - started
        if on_attempt is not None:
            on_attempt(attempt)
        if number > 1:
            logger.info(f"{name} succeeded on attempt {number}")
        return result

    raise RuntimeError("retry loop exited without a result")


__all__ = [
    "Attempt",
    "BackoffStrategy",
    "RetryConfig",
    "calculate_delay",
    "retry_async",
]
