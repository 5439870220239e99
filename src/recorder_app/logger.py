"""
Logging helpers built on loguru.

Modules call ``get_logger(__name__)`` once at import time; entry points call
``setup_logging`` to pick the level and sink.
"""

import sys

from loguru import logger as _logger

_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan> - <level>{message}</level>"
)


def setup_logging(level: str = "INFO") -> None:
    """Replace the default loguru sink with a single stderr sink."""
    _logger.remove()
    _logger.configure(extra={"name": "recorder_app"})
    _logger.add(sys.stderr, level=level.upper(), format=_FORMAT)


def get_logger(name: str):
    """Return a loguru logger bound to the given module name."""
    return _logger.bind(name=name)
