"""
PDF export logger.

Wraps loguru with an automatic [PDF] prefix. The library only emits records;
sinks are configured by the command line entry point through `setup_logger`.
"""

import sys

from loguru import logger

PREFIX = "[PDF]"

CONSOLE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>"


def setup_logger(verbose: bool = False) -> None:
    """Replace loguru's default sink with a single colorized stderr sink."""
    logger.remove()
    logger.add(
        sys.stderr,
        format=CONSOLE_FORMAT,
        level="DEBUG" if verbose else "INFO",
        colorize=True,
    )


def info(message: str) -> None:
    logger.info(f"{PREFIX} {message}")


def success(message: str) -> None:
    logger.success(f"{PREFIX} {message}")


def warning(message: str) -> None:
    logger.warning(f"{PREFIX} {message}")


def error(message: str) -> None:
    logger.error(f"{PREFIX} {message}")


def debug(message: str) -> None:
    logger.debug(f"{PREFIX} {message}")
