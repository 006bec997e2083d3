"""Console logging setup for scripts."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_handler: logging.Handler | None = None


def configure_logging(level: int | str = logging.INFO) -> logging.Logger:
    """Attach a single console handler to the ``payoffsim`` logger.

    Safe to call more than once; the handler is only added the first time.
    """
    global _handler

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    logger = logging.getLogger("payoffsim")
    logger.setLevel(level)
    if _handler is None:
        _handler = logging.StreamHandler()
        _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    if _handler not in logger.handlers:
        logger.addHandler(_handler)
    return logger
