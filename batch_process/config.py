"""
Options for a batch processing run.
Defaults are resolved per call; options can also be read from environment
variables (and a ``.env`` file) with ``BatchOptions.from_env``.
"""

import os
from typing import Any, Callable, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from telemetry.exceptions import InvalidConfigurationError
from telemetry.resilience import BackoffStrategy, RetryConfig

from .partition import DEFAULT_BATCH_SIZE, validate_batch_size

DEFAULT_INITIAL_DELAY = 0.1
DEFAULT_MAX_DELAY = 30.0

ProgressCallback = Callable[[int, int], Any]


def _parse_batch_size(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError as e:
        raise InvalidConfigurationError(
            "batch_size must be a positive integer", field="batch_size", value=raw
        ) from e
    return validate_batch_size(value)


class RetryPolicy(BaseModel):
    """Per-item retry settings"""
    model_config = ConfigDict(extra="forbid")

    max_attempts: int = Field(default=1, description="Attempts per item before it fails permanently")
    backoff: BackoffStrategy = Field(default=BackoffStrategy.LINEAR, description="Wait policy between attempts")
    initial_delay: float = Field(default=DEFAULT_INITIAL_DELAY, ge=0.0, description="Seconds to wait before the second attempt")
    max_delay: float = Field(default=DEFAULT_MAX_DELAY, ge=0.0, description="Upper bound for exponential waits, in seconds")

    @field_validator('max_attempts')
    @classmethod
    def at_least_one_attempt(cls, v):
        return max(v, 1)

    def to_retry_config(self) -> RetryConfig:
        return RetryConfig(
            max_attempts=self.max_attempts,
            initial_delay=self.initial_delay,
            max_delay=self.max_delay,
            backoff=self.backoff,
        )


class BatchOptions(BaseModel):
    """Options of one batch processing run"""
    model_config = ConfigDict(extra="forbid")

    batch_size: int = Field(default=DEFAULT_BATCH_SIZE, description="Items processed concurrently per batch")
    delay_between_batches: float = Field(default=0.0, ge=0.0, description="Seconds to wait before every batch but the first")
    retry: RetryPolicy = Field(default_factory=RetryPolicy)
    continue_on_error: bool = Field(default=False, description="Capture permanent failures instead of aborting the run")
    flatten: bool = Field(default=False, description="Return one flat list instead of one list per batch")
    timeout: Optional[float] = Field(default=None, gt=0.0, description="Per-attempt limit in seconds")
    on_progress: Optional[ProgressCallback] = Field(default=None, description="Called with (completed, total) after each batch")

    # Raises InvalidConfigurationError, which pydantic lets through unwrapped
    @field_validator('batch_size', mode='before')
    @classmethod
    def positive_batch_size(cls, v):
        return validate_batch_size(v)

    @classmethod
    def from_env(cls, prefix: str = "BATCH_", **overrides: Any) -> "BatchOptions":
        """Create options from environment variables, then apply overrides"""
        load_dotenv(find_dotenv(usecwd=True))

        def env(name: str, default: Optional[str] = None) -> Optional[str]:
            return os.getenv(f"{prefix}{name}", default)

        timeout = env("TIMEOUT")
        values: dict = dict(
            batch_size=_parse_batch_size(env("SIZE", str(DEFAULT_BATCH_SIZE))),
            delay_between_batches=float(env("DELAY_BETWEEN_BATCHES", "0")),
            continue_on_error=env("CONTINUE_ON_ERROR", "false").lower() == "true",
            flatten=env("FLATTEN", "false").lower() == "true",
            timeout=float(timeout) if timeout else None,
            retry=RetryPolicy(
                max_attempts=int(env("RETRY_MAX_ATTEMPTS", "1")),
                backoff=env("RETRY_BACKOFF", BackoffStrategy.LINEAR.value).lower(),
                initial_delay=float(env("RETRY_INITIAL_DELAY", str(DEFAULT_INITIAL_DELAY))),
                max_delay=float(env("RETRY_MAX_DELAY", str(DEFAULT_MAX_DELAY))),
            ),
        )
        values.update(overrides)
        return cls(**values)


def resolve_options(options: Optional[BatchOptions] = None, **overrides: Any) -> BatchOptions:
    """Merge keyword overrides into ``options`` (or the defaults), validating the result"""
    if options is None:
        return BatchOptions(**overrides)
    if not overrides:
        return options
    return BatchOptions(**{**dict(options), **overrides})
