"""Logging setup for the ``focuscontext`` logger namespace."""

from __future__ import annotations

import logging
import os
import sys

LOGGER_NAME = "focuscontext"
LOG_LEVEL_ENV = "FOCUSCONTEXT_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _resolve_level() -> int:
    raw = os.environ.get(LOG_LEVEL_ENV, "").strip().upper()
    if raw:
        level = getattr(logging, raw, None)
        if isinstance(level, int):
            return level
    return logging.INFO


def configure_logging(*, quiet: bool = False, verbose: bool = False) -> logging.Logger:
    """Set the package logger level and attach one stderr handler.

    ``--quiet``/``--verbose`` override ``FOCUSCONTEXT_LOG_LEVEL``. Repeated
    calls only adjust the level.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = _resolve_level()
    root = logging.getLogger(LOGGER_NAME)
    root.setLevel(level)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        root.propagate = False
    return root


__all__ = ["LOGGER_NAME", "LOG_LEVEL_ENV", "configure_logging"]
