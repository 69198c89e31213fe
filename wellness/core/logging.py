"""Logging setup for the API."""

import logging
import sys
from typing import Dict, Optional

from wellness.config import settings


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Driver loggers are noisy below WARNING
LIBRARY_LEVELS: Dict[str, int] = {
    "pymongo": logging.WARNING,
    "google.auth": logging.WARNING,
}


def setup_logging(name: str = "wellness", level: Optional[str] = None) -> logging.Logger:
    """
    Configure and return a stdout logger.

    Safe to call more than once; the handler is attached only the first time.
    """
    level = (level or settings.LOG_LEVEL).upper()
    numeric_level = getattr(logging, level, logging.INFO)

    logger = logging.getLogger(name)
    logger.setLevel(numeric_level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)

    for library, library_level in LIBRARY_LEVELS.items():
        logging.getLogger(library).setLevel(max(library_level, numeric_level))

    logger.debug(f"Logging configured with level: {level}")
    return logger


logger = setup_logging()
