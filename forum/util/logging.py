"""Standard library logging, forwarded to Logfire.

Application code logs through ``logfire`` directly. Third-party libraries
(uvicorn, kafka-python, redis, asyncpg) log through ``logging``; this
routes their records into the same Logfire pipeline.
"""

import logging

import logfire

from forum.config import Settings

# Libraries that are noisy at INFO (metadata refreshes, reconnects)
QUIET_LOGGERS = ("kafka", "redis", "asyncio")


def log_level(settings: Settings) -> int:
    if settings.debug:
        return logging.DEBUG
    if settings.environment == "production":
        return logging.WARNING
    return logging.INFO


def setup_logging(settings: Settings) -> None:
    """Send stdlib log records to Logfire.

    Call after ``configure_logfire``.

    Args:
        settings: Application settings
    """
    level = log_level(settings)
    logging.basicConfig(
        level=level,
        handlers=[logfire.LogfireLoggingHandler()],
        force=True,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    logfire.info("Logging configured", level=logging.getLevelName(level))
