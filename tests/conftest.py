"""Shared fixtures and markers for utfx tests."""

import pytest

from utfx.port.device import RegisterPort


def pytest_configure(config):
    config.addinivalue_line("markers", "conformance: replays reference conformance vectors")


@pytest.fixture
def port():
    """A fresh register port with range checking on, big-endian."""
    return RegisterPort()
