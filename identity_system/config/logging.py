"""Loguru configuration for the data layer and CLI, with dev/prod detection."""

import sys
from typing import Optional

from loguru import logger

from identity_system.config.settings import settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[component]}</cyan> | <level>{message}</level>"
)


def configure_logging(level: Optional[str] = None) -> None:
    """
    (Re)configure loguru sinks.

    Behavior:
    - Interactive stderr with LOG_FORMAT=console: colorized, one line per event
    - Anything else: JSON records on stderr
    - level overrides settings.log_level (the CLI's --verbose passes DEBUG)

    stdout is left to command output, so --json results stay parseable.
    """
    logger.remove()
    logger.configure(extra={"component": "identity_system"})

    sink_level = (level or settings.log_level).upper()
    if sys.stderr.isatty() and settings.log_format.lower() == "console":
        logger.add(sys.stderr, format=CONSOLE_FORMAT, level=sink_level, colorize=True)
    else:
        logger.add(
            sys.stderr,
            format="{message}",
            level=sink_level,
            serialize=True,
            diagnose=False,
        )


def get_logger(component: str):
    """
    Get a logger bound to a component name.

    Example:
        >>> log = get_logger("StatementLoader")
        >>> log.info("Statement batch loaded", statement_count=21)
    """
    return logger.bind(component=component)


configure_logging()

__all__ = ["logger", "get_logger", "configure_logging"]
