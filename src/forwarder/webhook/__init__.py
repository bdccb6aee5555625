"""GitHub webhook handling for the pull request forwarder.

This module receives GitHub webhook deliveries and forwards
``pull_request.opened`` events. Signature validation is performed here,
against the raw request body, before any payload parsing.
"""

from .handler import WebhookHandler, create_webhook_handler
from .models import PullRequestEvent, QueueMessage, WebhookOutcome, WebhookResult
from .signature import compute_signature, verify_signature

__all__ = [
    "PullRequestEvent",
    "QueueMessage",
    "WebhookHandler",
    "WebhookOutcome",
    "WebhookResult",
    "compute_signature",
    "create_webhook_handler",
    "verify_signature",
]
