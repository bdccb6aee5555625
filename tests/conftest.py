"""Pytest configuration for all tests."""

import pytest

from tests.forwarder.support import RecordingPublisher, make_settings


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run from an empty directory with no forwarder variables exported."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "WEBHOOK_SECRET",
        "SERVICE_BUS_CONNECTION_STRING",
        "SERVICE_BUS_QUEUE_NAME",
        "FORWARDER_HOST",
        "FORWARDER_PORT",
        "FORWARDER_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
