"""
Logging Configuration
=====================
Routes engine diagnostics through ``loguru``: stderr at the requested
level, plus an optional rotating file sink that keeps full detail.
"""

import sys
from typing import Optional

from loguru import logger


def setup_logging(level: str = "INFO", log_file: Optional[str] = None):
    """Route engine diagnostics to stderr and, optionally, a rotating file."""
    logger.remove()
    logger.add(sys.stderr, level=level)
    if log_file:
        logger.add(
            log_file,
            rotation="10 MB",
            retention="10 days",
            level="DEBUG",
            enqueue=True,
            backtrace=True,
            diagnose=True,
        )
    return logger
