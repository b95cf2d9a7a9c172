"""
Logging configuration for the storefront API.

All modules log through children of the "printdukan" logger; the level comes
from the LOG_LEVEL setting.
"""
import logging
import sys

from app.core.config import settings

LOG_LEVEL = settings.LOG_LEVEL.upper()
logger = logging.getLogger("printdukan")
logger.setLevel(LOG_LEVEL)

if not logger.handlers:
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(LOG_LEVEL)

    formatter = logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    console_handler.setFormatter(formatter)

    logger.addHandler(console_handler)

logger.propagate = False


def get_logger(name: str = None) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Optional suffix, appended to 'printdukan'

    Returns:
        Logger instance
    """
    if name:
        return logging.getLogger(f"printdukan.{name}")
    return logger
