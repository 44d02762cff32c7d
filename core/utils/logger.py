"""
Loguru-based logging configuration
"""
import sys
from pathlib import Path
from typing import Optional

from loguru import logger


CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}"


def setup_logger(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    serialize: bool = False,
) -> None:
    """
    Configure loguru logger with consistent formatting

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path for logging to file
        serialize: Emit console records as JSON lines (for log collectors
            scraping the controller pod)
    """
    # Remove default handler
    logger.remove()

    if serialize:
        logger.add(sys.stderr, level=log_level, serialize=True)
    else:
        logger.add(sys.stderr, format=CONSOLE_FORMAT, level=log_level, colorize=True)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_file,
            format=FILE_FORMAT,
            level=log_level,
            rotation="100 MB",
            retention="7 days",
            compression="zip",
        )

    logger.debug(f"Logger initialized with level: {log_level}")
