"""
Logging setup.

Every module logs through a named standard-library logger; this installs a
single console handler on the package logger when the app starts.
"""

import logging

from reviewdesk.core.config import settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> logging.Logger:
    """
    Configure the ``reviewdesk`` logger hierarchy.

    Args:
        level: Optional level name overriding ``settings.LOG_LEVEL``
            (``DEBUG=true`` forces debug output)

    Returns:
        The configured package logger
    """
    logger = logging.getLogger("reviewdesk")
    if level is None:
        level = "DEBUG" if settings.DEBUG else settings.LOG_LEVEL
    logger.setLevel(level.upper())

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    return logger
