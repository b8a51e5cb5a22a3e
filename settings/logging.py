"""Logging configuration."""

import logging
import os
import sys

from loguru import logger

from settings import LOG_DIR

LOG_LEVEL = os.getenv("SCP_LOG_LEVEL", "INFO")


class InterceptHandler(logging.Handler):
    """Forward stdlib records (httpx, duckdb) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.opt(exception=record.exc_info).log(level, record.getMessage())


def setup_logging(level: str = LOG_LEVEL, to_file: bool = True):
    """Configure console sink, optional daily file sink, and stdlib interception."""
    logger.remove()

    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <7}</level> | <cyan>{name}</cyan> | <level>{message}</level>",
        level=level,
        colorize=True,
    )

    if to_file:
        LOG_DIR.mkdir(exist_ok=True)
        logger.add(
            LOG_DIR / "scp_{time:YYYY-MM-DD}.log",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {thread.name} | {name}:{function}:{line} | {message}",
            level="DEBUG",
            rotation="00:00",
            retention="14 days",
            compression="gz",
            enqueue=True,
        )
        logger.info("Logging to {}", LOG_DIR)

    logging.basicConfig(handlers=[InterceptHandler()], level=logging.WARNING, force=True)

    return logger
