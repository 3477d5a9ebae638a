"""Utility to provide a shared logger configuration for viesvat."""

from __future__ import annotations

import logging
import sys
from typing import Final

_LOGGER_NAME: Final = "viesvat"
HANDLER_NAME: Final = "viesvat-console"
_FORMAT: Final = "[%(asctime)s] %(levelname)s - %(message)s"


def setup_logger(level: int | None = None) -> logging.Logger:
    """Return the shared viesvat logger configured for console output on stderr.

    The level is only changed when *level* is given, so modules calling this at
    import time do not reset a level chosen by the command line.
    """

    logger = logging.getLogger(_LOGGER_NAME)
    if level is not None:
        logger.setLevel(level)
    elif logger.level == logging.NOTSET:
        logger.setLevel(logging.INFO)
    logger.propagate = False

    if not any(handler.get_name() == HANDLER_NAME for handler in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.set_name(HANDLER_NAME)
        handler.setFormatter(logging.Formatter(_FORMAT, "%H:%M:%S"))
        logger.addHandler(handler)

    return logger
