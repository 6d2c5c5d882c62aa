"""Stderr diagnostics for the gorg logger hierarchy."""

from __future__ import annotations

import logging
from collections.abc import Mapping

LOG_LEVEL_ENV_VAR = "GORG_LOG"
ROOT_LOGGER_NAME = "gorg"
LOG_FORMAT = "gorg: %(levelname)s: %(message)s"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


def resolve_level(verbose: bool, environ: Mapping[str, str]) -> int:
    """Pick the level from --verbose, then GORG_LOG, then WARNING."""
    if verbose:
        return logging.DEBUG
    raw = environ.get(LOG_LEVEL_ENV_VAR, "").strip().lower()
    return _LEVELS.get(raw, logging.WARNING)


def configure_logging(verbose: bool, environ: Mapping[str, str]) -> logging.Logger:
    """Attach a single stderr handler to the package logger."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(resolve_level(verbose, environ))
    for handler in list(logger.handlers):
        if getattr(handler, "_gorg_console", False):
            logger.removeHandler(handler)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._gorg_console = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    return logger
