"""Pytest configuration and shared fixtures for all tests."""

import logging
import os
import sys
from pathlib import Path

import pytest

# Add src to path for all test modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from crosscors.decision import CorsResponse  # noqa: E402


class FakeRequest:
    """Minimal request view with a method and a plain header dict."""

    def __init__(self, method: str = "GET", headers: dict[str, str] | None = None, origin: str | None = None):
        self.method = method
        self.headers = dict(headers or {})
        if origin is not None:
            self.headers["Origin"] = origin


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch, tmp_path):
    """Keep CROSSCORS_* variables and stray config files out of every test."""
    for name in list(os.environ):
        if name.startswith("CROSSCORS_"):
            monkeypatch.delenv(name)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)
    yield


@pytest.fixture
def crosscors_logger():
    """The `crosscors` logger, with its handlers and level restored afterwards."""
    logger = logging.getLogger("crosscors")
    handlers, level = list(logger.handlers), logger.level
    yield logger
    logger.handlers = handlers
    logger.setLevel(level)


@pytest.fixture
def make_request():
    """Factory for request views."""
    return FakeRequest


@pytest.fixture
def response():
    """A fresh in-memory response."""
    return CorsResponse()


# Add pytest markers for different test types
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "server: mark test as server test")


def pytest_collection_modifyitems(config, items):  # noqa: ARG001
    """Modify test items during collection."""
    # Mark tests based on their location
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "server" in str(item.fspath):
            item.add_marker(pytest.mark.server)
