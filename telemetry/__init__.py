"""
Telemetry package for batch processing.
Provides logging, timing, error handling, and resilience patterns.

This package contains focused telemetry modules:
- telemetry.logging: Logging configuration and formatters
- telemetry.timing: Timing of code blocks
- telemetry.exceptions: Custom exceptions and error summaries
- telemetry.resilience: Retry with backoff and timeout racing
"""

__version__ = "1.0.0"

from .exceptions import *
from .logging import *
from .resilience import *
from .timing import *
