"""Logging setup built on loguru.

All log output goes to stderr so stdout stays reserved for JSON results.
The default level is ERROR: a scripted caller sees nothing but the JSON
error envelope unless it asks for more with ``--verbose``.
"""

import sys
import typing as t

from loguru import logger

from ..config.settings import Environment, LogLevel, Settings

if t.TYPE_CHECKING:
    import loguru

_DEVELOPMENT_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan> - <level>{message}</level>"
)

_configured = False


def configure_logger(
    level: LogLevel = LogLevel.ERROR,
    environment: Environment = Environment.DEVELOPMENT,
) -> None:
    """Replace loguru's handlers with a single stderr sink.

    Args:
        level: Minimum level to emit
        environment: PRODUCTION emits one JSON document per record,
            anything else a compact human-readable line
    """
    global _configured

    logger.remove()
    logger.configure(extra={"name": "ddq"})

    if environment == Environment.PRODUCTION:
        logger.add(sys.stderr, level=level.value, serialize=True)
    else:
        logger.add(
            sys.stderr,
            level=level.value,
            format=_DEVELOPMENT_FORMAT,
            colorize=environment == Environment.DEVELOPMENT,
            backtrace=False,
            diagnose=False,
        )

    _configured = True


def setup_logging(settings: Settings) -> None:
    """Configure logging from application settings."""
    configure_logger(level=settings.log_level, environment=settings.environment)


def get_logger(name: str) -> "loguru.Logger":
    """Return a logger bound to ``name``, configuring defaults on first use."""
    if not _configured:
        configure_logger()
    return logger.bind(name=name)


def reset_logging() -> None:
    """Drop all handlers so the next get_logger call reconfigures. For tests."""
    global _configured

    logger.remove()
    _configured = False
