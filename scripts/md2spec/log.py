"""Package-wide logger."""

from __future__ import annotations

import logging

__all__ = ["logger", "configure_logging"]

logger = logging.getLogger("md2spec")

_FORMAT = "%(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool = False) -> None:
    """Send package logs to stderr at INFO, or DEBUG when verbose."""
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
