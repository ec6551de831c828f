"""
Loguru sinks for the API process.

Modules log through `from loguru import logger`. Records from stdlib loggers
(uvicorn, SQLAlchemy) are forwarded into the same sinks.
"""

import logging
import sys
from pathlib import Path

from loguru import logger

from core.config import settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> "
    "| <level>{level: <8}</level> "
    "| <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> "
    "- <level>{message}</level>"
)

FORWARDED_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "sqlalchemy.engine")


class InterceptHandler(logging.Handler):
    """Re-emit a stdlib log record through loguru, keeping its level and caller."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # walk out of the logging module so {name}:{line} point at the caller
        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _forward_stdlib_logging() -> None:
    handler = InterceptHandler()
    for name in FORWARDED_LOGGERS:
        std_logger = logging.getLogger(name)
        std_logger.handlers = [handler]
        std_logger.propagate = False


def configure_logging() -> Path:
    """Install the stderr and daily file sinks. Returns the file sink pattern."""
    logger.remove()

    logger.add(
        sys.stderr,
        level=settings.LOG_LEVEL,
        diagnose=False,
        backtrace=settings.ENV == "development",
        enqueue=True,
        format=CONSOLE_FORMAT,
    )

    log_path = Path(settings.LOG_DIR) / "summarizer_{time:YYYY-MM-DD}.log"
    logger.add(
        str(log_path),
        rotation="00:00",
        retention=f"{settings.LOG_RETENTION_DAYS} days",
        compression="zip",
        level=settings.LOG_FILE_LEVEL,
        enqueue=True,
        backtrace=False,
    )

    _forward_stdlib_logging()
    logger.debug("Logging to stderr ({}) and {} ({})", settings.LOG_LEVEL, log_path, settings.LOG_FILE_LEVEL)
    return log_path
