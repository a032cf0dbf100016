"""Logging configuration for the library API."""

import logging
import sys
from bjjlib.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Every logger below hangs off this one
ROOT_LOGGER_NAME = "bjjlib"

# Chatty at DEBUG/INFO and not ours to tune
NOISY_LOGGERS = ("googleapiclient.discovery_cache", "urllib3", "PIL")

logging.basicConfig(
    level=logging.DEBUG if settings.debug else settings.log_level.upper(),
    format=LOG_FORMAT,
    handlers=[logging.StreamHandler(sys.stdout)],
)

for noisy in NOISY_LOGGERS:
    logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger below the ``bjjlib`` namespace.

    Args:
        name: Short component name, e.g. "api" -> "bjjlib.api"

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")

    # Production never logs below INFO, whatever LOG_LEVEL says
    if settings.is_production:
        logger.setLevel(max(logging.INFO, logging.getLogger().level))

    return logger


app_logger = get_logger("app")
db_logger = get_logger("database")
redis_logger = get_logger("redis")
auth_logger = get_logger("auth")
api_logger = get_logger("api")
