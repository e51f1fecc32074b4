"""Fixtures for the tlctrips CLI tests."""

import logging

import pytest


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo the root logger changes made by configure_logging."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
