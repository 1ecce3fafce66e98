"""
Timing utilities for performance measurement.

- context_managers: TimingContext
"""

from .context_managers import (
    TimingContext,
)

__all__ = [
    "TimingContext",
]
