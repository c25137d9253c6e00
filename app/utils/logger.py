"""
Centralized logging utility.

Provides a consistent, structured logger across the service layer.
Credential-like fields passed through ``extra`` are masked before
they reach any handler.
"""

import logging
import os
import sys
from typing import Optional

LOG_LEVEL = os.getenv("EVENTBELL_LOG_LEVEL", "INFO").upper()

# Attributes attached via ``extra=`` that must never be printed verbatim
REDACTED_FIELDS = frozenset({"api", "api_key", "password", "access_token"})


class RedactSecretsFilter(logging.Filter):
    """Mask credential-like attributes on a log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        for field in REDACTED_FIELDS:
            if getattr(record, field, None):
                setattr(record, field, "***")
        return True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Create or retrieve a configured logger instance.

    Args:
        name (Optional[str]): Logger name (usually __name__).

    Returns:
        logging.Logger: Configured logger instance.
    """
    logger = logging.getLogger(name)
    logger.setLevel(LOG_LEVEL)

    # NiceGUI page reloads would otherwise stack handlers
    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stderr)
    handler.addFilter(RedactSecretsFilter())

    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handler.setFormatter(formatter)
    logger.addHandler(handler)

    logger.propagate = False

    return logger
