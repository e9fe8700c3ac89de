"""Logging setup for the service."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Route ``cloud_browser`` records to stderr at ``level``.

    Safe to call once per app instance: the level is refreshed every time,
    the stream handler is only attached the first time.
    """
    logger = logging.getLogger("cloud_browser")
    logger.setLevel(logging.getLevelName(level.upper()))
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False
    return logger
