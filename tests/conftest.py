"""Shared pytest configuration and fixtures."""

import pytest

from canary.utils.logger import setup_logger
from tests.fakes import RecordingLogStore, RecordingMetricsSink


@pytest.fixture
def logger():
    """Create logger for tests."""
    return setup_logger("test")


@pytest.fixture
def metrics_sink():
    return RecordingMetricsSink()


@pytest.fixture
def log_store():
    return RecordingLogStore()
