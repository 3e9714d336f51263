"""Pytest configuration and fixtures."""

import shutil
import tempfile

import pytest


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    temp_path = tempfile.mkdtemp()
    yield temp_path
    shutil.rmtree(temp_path)


@pytest.fixture
def sample_log_document():
    """Sample on-disk log document, as written by the tracker."""
    return {
        "2024-01-01": [
            {
                "branch": "main",
                "start": "2024-01-01T10:00:00.000Z",
                "stop": "2024-01-01T12:00:00.000Z",
            },
            {
                "branch": "feature-x",
                "start": "2024-01-01T12:00:00.000Z",
                "stop": None,
            },
        ],
        "2024-01-02": [
            {
                "branch": "main",
                "start": "2024-01-02T09:15:00.000Z",
                "stop": "2024-01-02T17:45:30.000Z",
            },
        ],
    }


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "unit: mark test as unit test")
