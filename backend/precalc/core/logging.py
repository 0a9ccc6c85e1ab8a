"""Process-wide logging setup."""
from __future__ import annotations
import logging
import sys

LOG_LINE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"

_LOGGING_INITIALIZED = False


def configure_logging(level: str = "INFO") -> None:
    """Attach one stdout handler to the ``precalc`` logger; later calls only adjust the level."""
    global _LOGGING_INITIALIZED

    logger = logging.getLogger("precalc")
    logger.setLevel(level.upper())
    if _LOGGING_INITIALIZED:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_LINE_FORMAT, datefmt=LOG_DATE_FORMAT))
    logger.addHandler(handler)
    _LOGGING_INITIALIZED = True
