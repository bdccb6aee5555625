"""GitHub webhook and queue message models.

This module defines the data models that live for a single webhook
invocation:

- PullRequestEvent: the subset of a ``pull_request`` payload that is consumed
- QueueMessage: the projection published to the queue
- WebhookResult: the HTTP outcome produced by the handler

Only the fields listed here are read from GitHub payloads; everything else
in the delivery is ignored.
"""

from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

PULL_REQUEST_EVENT = "pull_request"
OPENED_ACTION = "opened"


class WebhookOutcome(str, Enum):
    """How a webhook invocation ended.

    Attributes:
        FORWARDED: A message was published to the queue.
        IGNORED_EVENT: The event type was not ``pull_request``.
        IGNORED_ACTION: The pull request action was not ``opened``.
        UNAUTHORIZED: The signature was missing or did not match.
        NOT_CONFIGURED: Required configuration is missing.
        INVALID_PAYLOAD: The signed body was not a usable pull request event.
        PUBLISH_FAILED: The queue publish raised an error.
    """

    FORWARDED = "forwarded"
    IGNORED_EVENT = "ignored_event"
    IGNORED_ACTION = "ignored_action"
    UNAUTHORIZED = "unauthorized"
    NOT_CONFIGURED = "not_configured"
    INVALID_PAYLOAD = "invalid_payload"
    PUBLISH_FAILED = "publish_failed"


class Head(BaseModel):
    """Head branch of the pull request."""

    ref: str


class PullRequest(BaseModel):
    """The ``pull_request`` object of the payload."""

    number: int = Field(..., strict=True)
    head: Head


class Repository(BaseModel):
    """The ``repository`` object of the payload."""

    full_name: str


class PullRequestEvent(BaseModel):
    """Parsed GitHub ``pull_request`` webhook payload.

    Attributes:
        action: The pull request action (opened, closed, synchronize, ...).
        pull_request: The pull request number and head branch.
        repository: The repository in ``owner/repo`` form.
    """

    action: str
    pull_request: PullRequest
    repository: Repository

    def to_queue_message(self) -> "QueueMessage":
        """Project the event onto the queue message shape."""
        return QueueMessage(
            pr_number=self.pull_request.number,
            branch=self.pull_request.head.ref,
            repo_full_name=self.repository.full_name,
        )


class QueueMessage(BaseModel):
    """Message published for each opened pull request.

    Serialized with camelCase keys:
    ``{"prNumber": 42, "branch": "feature-x", "repoFullName": "org/repo"}``
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    pr_number: int = Field(..., alias="prNumber")
    branch: str
    repo_full_name: str = Field(..., alias="repoFullName")

    def to_body(self) -> Dict[str, Any]:
        """Return the message body as a JSON-ready dict."""
        return self.model_dump(by_alias=True)


class WebhookResult(BaseModel):
    """HTTP response produced by the webhook handler."""

    status_code: int
    body: str
    outcome: WebhookOutcome
