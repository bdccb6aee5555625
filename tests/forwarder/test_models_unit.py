"""Tests for webhook and queue message models."""

import pytest
from pydantic import ValidationError

from src.forwarder.webhook.models import PullRequestEvent, QueueMessage
from tests.forwarder.support import make_payload


class TestPullRequestEvent:
    def test_parses_consumed_fields(self):
        event = PullRequestEvent.model_validate(make_payload())

        assert event.action == "opened"
        assert event.pull_request.number == 42
        assert event.pull_request.head.ref == "feature-x"
        assert event.repository.full_name == "org/repo"

    def test_projects_to_queue_message(self):
        event = PullRequestEvent.model_validate(
            make_payload(number=7, ref="release/1.2", full_name="acme/widgets")
        )

        assert event.to_queue_message() == QueueMessage(
            prNumber=7, branch="release/1.2", repoFullName="acme/widgets"
        )

    def test_string_number_is_rejected(self):
        payload = make_payload()
        payload["pull_request"]["number"] = "42"

        with pytest.raises(ValidationError):
            PullRequestEvent.model_validate(payload)


class TestQueueMessage:
    def test_body_uses_camel_case_keys(self):
        message = QueueMessage(pr_number=1, branch="main", repo_full_name="o/r")

        assert message.to_body() == {"prNumber": 1, "branch": "main", "repoFullName": "o/r"}

    def test_is_immutable(self):
        message = QueueMessage(pr_number=1, branch="main", repo_full_name="o/r")

        with pytest.raises(ValidationError):
            message.branch = "other"
