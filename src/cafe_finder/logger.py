"""Logging setup for the service.

Modules log through ``logging.getLogger(__name__)``; this module only
installs the console handler on the package logger once at startup.
"""

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
PACKAGE_LOGGER = "cafe_finder"


def setup_logging(level: str | int = "INFO") -> logging.Logger:
    """Configure the package logger.

    Args:
        level: Log level name ("DEBUG", "INFO", ...) or numeric level

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)

    # Avoid adding duplicate handlers if re-initialized
    if not logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(console_handler)

    logger.setLevel(level)
    return logger
