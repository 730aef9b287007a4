"""Shared package logger."""
import logging
import sys
from typing import Optional, Union

LOGGER_NAME = "pocket_calculator"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger: logging.Logger = logging.getLogger(LOGGER_NAME)
logger.addHandler(logging.NullHandler())

_stream_handler: Optional[logging.Handler] = None


def configure_logging(level: Union[int, str] = logging.WARNING) -> logging.Logger:
    """
    Attach a stderr handler to the package logger and set its level.

    Calling it again only updates the level, so handlers are never duplicated.

    :param level: Logging level as a number or a level name (e.g. "INFO")

    :return: The configured package logger
    :rtype: logging.Logger
    """
    global _stream_handler

    if isinstance(level, str):
        level = level.upper()
    logger.setLevel(level)

    if _stream_handler is None:
        _stream_handler = logging.StreamHandler(sys.stderr)
        _stream_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(_stream_handler)

    return logger
