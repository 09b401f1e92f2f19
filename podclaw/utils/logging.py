"""Logging configuration for Podclaw"""

import logging
from typing import Optional

from ..config import LOG_FILE, LOG_LEVEL


def setup_logging(log_file: Optional[str] = LOG_FILE, level: str = LOG_LEVEL) -> logging.Logger:
    """Set up logging configuration"""
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.insert(0, logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format='%(asctime)s - %(levelname)s - %(name)s - %(message)s',
        handlers=handlers
    )

    # Suppress verbose HTTP client logging
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)

    return logging.getLogger("podclaw")


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance"""
    return logging.getLogger(name)
