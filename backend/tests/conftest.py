"""Pytest configuration and fixtures."""

import logging

import pytest


@pytest.fixture(autouse=True)
def _debug_logging(caplog):
    """Capture app logs at DEBUG so tests can assert on skipped events."""
    caplog.set_level(logging.DEBUG, logger="app")
    yield
