"""Queue publishing for forwarded pull request messages."""

from .publisher import MessagePublisher, QueuePublishError, ServiceBusPublisher

__all__ = [
    "MessagePublisher",
    "QueuePublishError",
    "ServiceBusPublisher",
]
