"""Core logger functionality for batch processing runs."""

import logging
import logging.handlers
import sys
from pathlib import Path

from .formatters import JSONFormatter

# Default logging format
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(level: str | int) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.INFO)
    return level


def get_logger(
    name: str,
    level: str | int = logging.INFO,
    format_string: str | None = None,
    date_format: str | None = None,
) -> logging.Logger:
    """Get a configured logger instance with consistent formatting."""
    logger = logging.getLogger(name)
    level = _resolve_level(level)

    # Prevent duplicate handlers and keep levels chosen by setup_logging()
    if logger.handlers:
        return logger

    logger.setLevel(level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(
        logging.Formatter(
            fmt=format_string or DEFAULT_FORMAT,
            datefmt=date_format or DEFAULT_DATE_FORMAT,
        )
    )
    logger.addHandler(console_handler)

    # Prevent propagation to avoid duplicate logs
    logger.propagate = False

    return logger


def setup_logging(
    level: str | int = logging.INFO,
    log_file: str | Path | None = None,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
    json_format: bool = False,
    format_string: str | None = None,
    date_format: str | None = None,
    disable_existing_loggers: bool = False,
) -> None:
    """
    Configure global logging for an application embedding the batch engine.

    Replaces the root handlers with a stdout handler (and a rotating file
    handler when ``log_file`` is given). Loggers created through
    :func:`get_logger` are switched back to propagating to the root so that
    all records share the same handlers, unless ``disable_existing_loggers``
    is set.
    """
    level = _resolve_level(level)

    if json_format:
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            fmt=format_string or DEFAULT_FORMAT,
            datefmt=date_format or DEFAULT_DATE_FORMAT,
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            filename=str(log_path),
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    if not disable_existing_loggers:
        for logger_name in list(logging.root.manager.loggerDict):
            logger = logging.getLogger(logger_name)
            logger.setLevel(level)
            logger.handlers.clear()
            logger.propagate = True


def basic_config(level: str = "INFO", format: str | None = None) -> None:
    """Quick logging setup for scripts and notebooks."""
    setup_logging(level=level, format_string=format)
