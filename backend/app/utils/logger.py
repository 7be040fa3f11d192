"""
Barangay Portal — Logging Configuration
Console logging shared by routers and services. Audit events
(authorization decisions, record fetches and writes) go through here too.
"""

import logging
import sys

from app.config import get_settings


def setup_logger(name: str = "barangay-portal", level: str | None = None) -> logging.Logger:
    """Create a configured logger with console output."""
    logger = logging.getLogger(name)

    if not logger.handlers:
        level_name = (level or get_settings().log_level).upper()
        log_level = getattr(logging, level_name, logging.INFO)
        logger.setLevel(log_level)

        # Console handler with format
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(log_level)

        formatter = logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


# Global logger instance
logger = setup_logger()
