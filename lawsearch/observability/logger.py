"""
Logger configuration.

Provides root logger setup with ISO timestamps for services and workers.

Dependencies: logging (stdlib), lawsearch.configs
System role: Centralized logging configuration
"""

import logging
import sys

from lawsearch.configs import get_settings

# Third-party loggers that flood INFO with per-request lines
_NOISY_LOGGERS = ("urllib3", "botocore", "boto3", "httpx", "httpcore", "aiosqlite")


def configure_logging(level: str | None = None) -> None:
    """
    Configure Python logging with ISO timestamp and structured format.

    Args:
        level: Root log level name; defaults to the configured log_level
    """
    # Remove any existing handlers to avoid duplicates
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.DEBUG)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
    handler.setFormatter(formatter)

    root_logger.setLevel((level or get_settings().log_level).upper())
    root_logger.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get configured logger.

    Args:
        name: Logger name (usually __name__)

    Returns:
        logging.Logger: Configured logger instance
    """
    return logging.getLogger(name)
