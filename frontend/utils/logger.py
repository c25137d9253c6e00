import logging
import os

from app.utils.logger import RedactSecretsFilter

LOG_LEVEL = os.getenv("EVENTBELL_FRONTEND_LOG_LEVEL", "INFO").upper()


def get_logger(name: str) -> logging.Logger:
    """Logger for UI code, tagged FRONTEND and tuned separately from services."""
    logger = logging.getLogger(name)
    logger.setLevel(LOG_LEVEL)

    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.addFilter(RedactSecretsFilter())

    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)s | FRONTEND | %(name)s | %(message)s"
    )

    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.propagate = False

    return logger
