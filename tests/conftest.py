"""Shared fixtures for roslist tests."""

from __future__ import annotations

import logging

import pytest


@pytest.fixture(autouse=True)
def _reset_roslist_logger():
    """Drop handlers added by configure_logging so they never outlive a test's stderr."""
    logger = logging.getLogger("roslist")
    handlers = list(logger.handlers)
    level = logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
