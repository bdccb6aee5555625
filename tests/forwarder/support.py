"""Shared factories and fake publishers for forwarder tests."""

import json
from typing import List

from src.forwarder.config import ForwarderSettings
from src.forwarder.messaging.publisher import MessagePublisher, QueuePublishError
from src.forwarder.webhook.models import QueueMessage
from src.forwarder.webhook.signature import compute_signature

TEST_SECRET = "s3cr3t"
TEST_CONNECTION_STRING = (
    "Endpoint=sb://test-namespace.servicebus.windows.net/;"
    "SharedAccessKeyName=RootManageSharedAccessKey;SharedAccessKey=dGVzdA=="
)
TEST_QUEUE_NAME = "pull-requests"


class RecordingPublisher(MessagePublisher):
    """In-memory publisher that records every published message."""

    def __init__(self) -> None:
        self.messages: List[QueueMessage] = []

    async def publish(self, message: QueueMessage) -> None:
        self.messages.append(message)


class FailingPublisher(MessagePublisher):
    """Publisher whose every publish fails."""

    def __init__(self, error: Exception = None) -> None:
        self.error = error or QueuePublishError(
            "queue unavailable", queue_name=TEST_QUEUE_NAME
        )
        self.attempts = 0

    async def publish(self, message: QueueMessage) -> None:
        self.attempts += 1
        raise self.error


def make_settings(**overrides) -> ForwarderSettings:
    values = {
        "webhook_secret": TEST_SECRET,
        "service_bus_connection_string": TEST_CONNECTION_STRING,
        "service_bus_queue_name": TEST_QUEUE_NAME,
    }
    values.update(overrides)
    return ForwarderSettings(_env_file=None, **values)


def make_payload(
    action: str = "opened",
    number: int = 42,
    ref: str = "feature-x",
    full_name: str = "org/repo",
) -> dict:
    return {
        "action": action,
        "pull_request": {
            "number": number,
            "head": {"ref": ref, "sha": "abc"},
            "html_url": "...",
            "title": "t",
            "user": {"login": "u"},
        },
        "repository": {"full_name": full_name},
    }


def encode(payload: dict) -> bytes:
    return json.dumps(payload).encode("utf-8")


def signed_headers(
    body: bytes, event: str = "pull_request", secret: str = TEST_SECRET
) -> dict:
    return {
        "X-GitHub-Event": event,
        "X-Hub-Signature-256": compute_signature(secret, body),
        "Content-Type": "application/json",
    }
