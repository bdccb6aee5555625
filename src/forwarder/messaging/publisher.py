"""Queue publishers for forwarded pull request messages.

This module defines the MessagePublisher interface used by the webhook
handler and the Azure Service Bus implementation used in production.
Tests substitute an in-memory publisher so no live queue is needed.

Source:
- src/forwarder/webhook/models.py (QueueMessage)
- src/forwarder/config.py (service_bus_connection_string, service_bus_queue_name)
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from azure.servicebus import ServiceBusMessage
from azure.servicebus.aio import ServiceBusClient

if TYPE_CHECKING:
    from src.forwarder.webhook.models import QueueMessage

logger = logging.getLogger(__name__)


class QueuePublishError(Exception):
    """Raised when a message could not be published to the queue.

    Attributes:
        message: Human-readable error description.
        queue_name: The queue the publish was aimed at.
    """

    def __init__(self, message: str, queue_name: str):
        self.message = message
        self.queue_name = queue_name
        super().__init__(message)


class MessagePublisher(ABC):
    """Abstract base class for queue publishers.

    Implementations publish exactly one message per call and must not
    retry. Any failure is raised as QueuePublishError so the handler can
    map it to an HTTP 500.
    """

    @abstractmethod
    async def publish(self, message: QueueMessage) -> None:
        """Publish one message.

        Args:
            message: The message to publish.

        Raises:
            QueuePublishError: If the message could not be published.
        """
        pass


class ServiceBusPublisher(MessagePublisher):
    """Publisher that sends messages to an Azure Service Bus queue.

    A client and sender are opened for each publish and closed before the
    call returns, whether or not the send succeeded.

    Attributes:
        queue_name: Name of the target queue.
    """

    def __init__(self, connection_string: str, queue_name: str) -> None:
        self._connection_string = connection_string
        self.queue_name = queue_name

    async def publish(self, message: QueueMessage) -> None:
        body = json.dumps(message.to_body())
        try:
            client = ServiceBusClient.from_connection_string(self._connection_string)
            async with client:
                sender = client.get_queue_sender(queue_name=self.queue_name)
                async with sender:
                    logger.info("Sending message to Service Bus queue %s...", self.queue_name)
                    await sender.send_messages(
                        ServiceBusMessage(body, content_type="application/json")
                    )
        except Exception as e:
            raise QueuePublishError(
                f"Failed to send message to queue {self.queue_name}: {e}",
                queue_name=self.queue_name,
            ) from e

        logger.info("Message sent successfully to queue %s", self.queue_name)
