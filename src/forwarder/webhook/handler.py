"""GitHub webhook handler for the pull request forwarder.

This module provides the WebhookHandler class, which authenticates a GitHub
delivery, narrows it to ``pull_request`` / ``opened`` and publishes one
QueueMessage per opened pull request.

Decision sequence for each request:
1. Missing configuration                -> 500
2. Missing X-Hub-Signature-256 header   -> 401 (body is not read)
3. Signature does not match the body    -> 401
4. X-GitHub-Event is not pull_request   -> 200, ignored
5. Body is not a JSON object            -> 400
6. action is not "opened"               -> 200, ignored
7. Payload lacks the consumed fields    -> 400
8. Queue publish fails                  -> 500
9. Otherwise                            -> 200, message published

GitHub Webhook Payload Structure (pull_request event, consumed fields):
{
  "action": "opened",
  "pull_request": {
    "number": 42,
    "head": {"ref": "feature-x"}
  },
  "repository": {
    "full_name": "org/repo"
  }
}

Handling is stateless: the settings and publisher are read-only and shared
between concurrent requests.
"""

from __future__ import annotations

import json
import logging
import time
from typing import TYPE_CHECKING, Awaitable, Callable, Mapping, Optional

from pydantic import ValidationError

from src.forwarder.config import ForwarderSettings
from src.forwarder.messaging.publisher import (
    MessagePublisher,
    ServiceBusPublisher,
)
from src.forwarder.webhook.models import (
    OPENED_ACTION,
    PULL_REQUEST_EVENT,
    PullRequestEvent,
    WebhookOutcome,
    WebhookResult,
)
from src.forwarder.webhook.signature import SIGNATURE_HEADER, verify_signature

if TYPE_CHECKING:
    from src.forwarder.metrics import ForwarderMetrics

logger = logging.getLogger(__name__)

EVENT_HEADER = "x-github-event"

NOT_CONFIGURED_MESSAGE = "Required environment variables are not configured."
INVALID_SIGNATURE_MESSAGE = "Invalid signature"
IGNORED_EVENT_MESSAGE = "Event ignored, not a pull_request event."
IGNORED_ACTION_MESSAGE = "Event ignored, not a 'pull_request opened' action."
INVALID_PAYLOAD_MESSAGE = "Invalid payload"
FORWARDED_MESSAGE = (
    "Successfully processed 'pull_request opened' event and sent message to queue."
)
PUBLISH_FAILED_MESSAGE = "Error processing request"


class WebhookHandler:
    """Handler for authenticating and forwarding GitHub webhook deliveries.

    The handler never raises to its caller: every path, including queue
    failures, ends in a WebhookResult.

    Attributes:
        settings: Forwarder settings, or None when configuration is missing.
        publisher: Queue publisher, or None when configuration is missing.
        metrics: Optional Prometheus metrics recorder.
    """

    def __init__(
        self,
        settings: Optional[ForwarderSettings],
        publisher: Optional[MessagePublisher],
        metrics: Optional[ForwarderMetrics] = None,
    ) -> None:
        self.settings = settings
        self.publisher = publisher
        self.metrics = metrics

    @property
    def is_configured(self) -> bool:
        """Whether the handler has everything it needs to forward events."""
        return self.settings is not None and self.publisher is not None

    async def handle(
        self,
        headers: Mapping[str, str],
        read_body: Callable[[], Awaitable[bytes]],
    ) -> WebhookResult:
        """Process a single webhook delivery.

        Args:
            headers: Request headers. Names are matched case-insensitively.
            read_body: Awaitable callable returning the raw request body.
                       It is only awaited once a signature header is present.

        Returns:
            The WebhookResult describing the HTTP response to send.
        """
        logger.info("GitHub webhook received a request.")

        if not self.is_configured:
            logger.error(
                "One or more required environment variables are not configured."
            )
            return self._result(500, NOT_CONFIGURED_MESSAGE, WebhookOutcome.NOT_CONFIGURED)

        normalized = {name.lower(): value for name, value in headers.items()}

        signature = normalized.get(SIGNATURE_HEADER)
        if not signature:
            logger.warning("Request is missing the X-Hub-Signature-256 header.")
            return self._result(401, INVALID_SIGNATURE_MESSAGE, WebhookOutcome.UNAUTHORIZED)

        raw_body = await read_body()

        if not verify_signature(self.settings.webhook_secret, raw_body, signature):
            logger.error("Signature verification failed.")
            return self._result(401, INVALID_SIGNATURE_MESSAGE, WebhookOutcome.UNAUTHORIZED)

        github_event = normalized.get(EVENT_HEADER)
        logger.info("Received event: %s", github_event)

        if github_event != PULL_REQUEST_EVENT:
            logger.info("Ignoring event of type: %s", github_event)
            return self._result(200, IGNORED_EVENT_MESSAGE, WebhookOutcome.IGNORED_EVENT)

        try:
            payload = json.loads(raw_body)
        except (ValueError, RecursionError) as e:
            logger.warning("Signed pull_request payload is not valid JSON: %s", e)
            return self._result(400, INVALID_PAYLOAD_MESSAGE, WebhookOutcome.INVALID_PAYLOAD)

        if not isinstance(payload, dict):
            logger.warning("Invalid payload: expected object, got %s", type(payload).__name__)
            return self._result(400, INVALID_PAYLOAD_MESSAGE, WebhookOutcome.INVALID_PAYLOAD)

        action = payload.get("action")
        if action != OPENED_ACTION:
            logger.info("Ignoring pull_request action: %s", action)
            return self._result(200, IGNORED_ACTION_MESSAGE, WebhookOutcome.IGNORED_ACTION)

        try:
            event = PullRequestEvent.model_validate(payload)
        except ValidationError as e:
            logger.warning(
                "pull_request payload is missing required fields: %s",
                ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors()),
            )
            return self._result(400, INVALID_PAYLOAD_MESSAGE, WebhookOutcome.INVALID_PAYLOAD)

        message = event.to_queue_message()

        started = time.perf_counter()
        try:
            await self.publisher.publish(message)
        except Exception:
            logger.exception("Error sending message to Service Bus")
            return self._result(500, PUBLISH_FAILED_MESSAGE, WebhookOutcome.PUBLISH_FAILED)
        finally:
            if self.metrics is not None:
                self.metrics.record_publish_duration(time.perf_counter() - started)

        logger.info(
            "Forwarded pull request %s#%s (branch %s)",
            message.repo_full_name,
            message.pr_number,
            message.branch,
        )
        return self._result(200, FORWARDED_MESSAGE, WebhookOutcome.FORWARDED)

    def _result(
        self, status_code: int, body: str, outcome: WebhookOutcome
    ) -> WebhookResult:
        if self.metrics is not None:
            self.metrics.record_outcome(outcome)
        return WebhookResult(status_code=status_code, body=body, outcome=outcome)


def create_webhook_handler(
    settings: Optional[ForwarderSettings],
    metrics: Optional[ForwarderMetrics] = None,
) -> WebhookHandler:
    """Factory function to create a WebhookHandler wired to Service Bus.

    Args:
        settings: Loaded settings, or None if configuration is missing.
        metrics: Optional metrics recorder.

    Returns:
        A WebhookHandler. Without settings it has no publisher and answers
        every request with HTTP 500.
    """
    publisher = None
    if settings is not None:
        publisher = ServiceBusPublisher(
            connection_string=settings.service_bus_connection_string,
            queue_name=settings.service_bus_queue_name,
        )
    return WebhookHandler(settings=settings, publisher=publisher, metrics=metrics)
