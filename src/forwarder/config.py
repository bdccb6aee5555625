"""Forwarder configuration using pydantic-settings.

This module defines the settings classes that read configuration from
environment variables (or a local ``.env`` file). Settings are loaded once
at startup and passed into the webhook handler; nothing reads the process
environment at request time.

Environment variables:
- WEBHOOK_SECRET: Shared secret configured on the GitHub webhook
- SERVICE_BUS_CONNECTION_STRING: Azure Service Bus connection string
- SERVICE_BUS_QUEUE_NAME: Queue that receives pull request messages
- FORWARDER_HOST / FORWARDER_PORT / FORWARDER_LOG_LEVEL: Server options
"""

import logging
from typing import Optional

from pydantic import ValidationError, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ForwarderSettings(BaseSettings):
    """Webhook forwarder configuration from environment variables.

    All three fields are required and have no defaults. A missing or blank
    value is a deployment error: the service still starts, but every webhook
    request is answered with HTTP 500 until the configuration is fixed.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Secret for validating GitHub webhook signatures
    webhook_secret: str

    # Connection string for the Azure Service Bus namespace
    service_bus_connection_string: str

    # Name of the queue that receives pull request messages
    service_bus_queue_name: str

    @field_validator(
        "webhook_secret",
        "service_bus_connection_string",
        "service_bus_queue_name",
    )
    @classmethod
    def validate_not_blank(cls, v: str, info: ValidationInfo) -> str:
        """Validate that required values are not empty."""
        if not v or not v.strip():
            raise ValueError(f"{info.field_name} cannot be empty")
        return v


class ServerSettings(BaseSettings):
    """HTTP server options, prefixed with FORWARDER_."""

    model_config = SettingsConfigDict(
        env_prefix="FORWARDER_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate that port is in valid range."""
        if not 1 <= v <= 65535:
            raise ValueError("port must be between 1 and 65535")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize the log level name and reject unknown levels."""
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"unknown log level: {v}")
        return level


def load_settings() -> Optional[ForwarderSettings]:
    """Load forwarder settings, returning None when they are incomplete.

    Validation errors are logged by field name only. The error objects
    carry the rejected input, which may be the secret itself, so they are
    never logged directly.

    Returns:
        ForwarderSettings if every required value is present, None otherwise.
    """
    try:
        return ForwarderSettings()
    except ValidationError as e:
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
        logger.error(
            "One or more required environment variables are not configured: %s",
            ", ".join(fields),
        )
        return None
