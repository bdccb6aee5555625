"""Prometheus metrics for the webhook forwarder.

Metrics are exposed at the `/metrics` endpoint in Prometheus format.

Metrics Defined:
- forwarder_webhook_requests_total: Counter of webhook requests by outcome
- forwarder_queue_publish_duration_seconds: Histogram of queue publish time
"""

from typing import Optional

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram

from src.forwarder.webhook.models import WebhookOutcome

PUBLISH_DURATION_BUCKETS = (0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0)


class ForwarderMetrics:
    """Container for forwarder Prometheus metrics.

    Pass a custom registry for testing; the default REGISTRY only accepts
    one instance per process.

    Attributes:
        registry: The Prometheus registry for these metrics.
        webhook_requests_total: Counter labelled by outcome.
        queue_publish_duration_seconds: Histogram of publish durations.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or REGISTRY

        self.webhook_requests_total = Counter(
            "forwarder_webhook_requests_total",
            "Total number of webhook requests handled, by outcome",
            labelnames=["outcome"],
            registry=self.registry,
        )

        self.queue_publish_duration_seconds = Histogram(
            "forwarder_queue_publish_duration_seconds",
            "Time spent publishing a message to the queue in seconds",
            buckets=PUBLISH_DURATION_BUCKETS,
            registry=self.registry,
        )

        for outcome in WebhookOutcome:
            self.webhook_requests_total.labels(outcome=outcome.value)

    def record_outcome(self, outcome: WebhookOutcome) -> None:
        """Count one handled webhook request."""
        self.webhook_requests_total.labels(outcome=outcome.value).inc()

    def record_publish_duration(self, duration_seconds: float) -> None:
        """Record how long a queue publish took, successful or not."""
        self.queue_publish_duration_seconds.observe(duration_seconds)
