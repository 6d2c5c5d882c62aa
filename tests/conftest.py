"""Test configuration helpers."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest


@pytest.fixture(autouse=True)
def _reset_gorg_logger() -> Iterator[None]:
    # configure_logging binds a handler to the stderr of the moment; drop it between tests
    logger = logging.getLogger("gorg")
    handlers = list(logger.handlers)
    level = logger.level
    yield
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
    logger.setLevel(level)
