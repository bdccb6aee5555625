"""FastAPI application entry point for the pull request forwarder.

This module provides the main FastAPI application. It receives GitHub
webhooks, forwards opened pull requests to Azure Service Bus, and exposes
health, readiness and Prometheus metrics endpoints.

Configuration is loaded once during lifespan startup. When required values
are missing the application still starts; the webhook endpoint answers
HTTP 500 and the readiness endpoint reports not ready.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from .config import ForwarderSettings, ServerSettings, load_settings
from .metrics import ForwarderMetrics
from .webhook.handler import NOT_CONFIGURED_MESSAGE, WebhookHandler, create_webhook_handler
from .webhook.models import WebhookOutcome

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

metrics = ForwarderMetrics()

# Initialized during lifespan startup
webhook_handler: Optional[WebhookHandler] = None


def _redact_secret(value: str, visible_chars: int = 4) -> str:
    """Redact a secret value, showing only the first few characters.

    Args:
        value: The secret value to redact.
        visible_chars: Number of characters to show at the start.

    Returns:
        Redacted string with asterisks replacing hidden characters.
    """
    if len(value) <= visible_chars:
        return "*" * len(value)
    return value[:visible_chars] + "*" * (len(value) - visible_chars)


def _log_configuration(settings: ForwarderSettings) -> None:
    """Log configuration values with secrets redacted."""
    logger.info("Forwarder configuration:")
    logger.info(f"  Webhook Secret: {_redact_secret(settings.webhook_secret)}")
    logger.info(
        "  Service Bus Connection String: "
        f"{_redact_secret(settings.service_bus_connection_string, visible_chars=12)}"
    )
    logger.info(f"  Service Bus Queue Name: {settings.service_bus_queue_name}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager.

    Loads settings, logs them with secrets redacted and wires the webhook
    handler to the Service Bus publisher.
    """
    global webhook_handler

    logger.info("Pull request forwarder starting up...")

    settings = load_settings()
    if settings is not None:
        _log_configuration(settings)
    else:
        logger.error("Forwarder is not configured; webhooks will be rejected with 500")

    webhook_handler = create_webhook_handler(settings, metrics=metrics)

    logger.info("Pull request forwarder started")

    yield

    logger.info("Pull request forwarder shutting down")


app = FastAPI(
    title="GitHub Pull Request Forwarder",
    description="Forwards opened GitHub pull requests to an Azure Service Bus queue",
    version="1.0.0",
    lifespan=lifespan,
)


@app.get("/health")
async def health():
    """Liveness check endpoint."""
    return {"status": "healthy"}


@app.get("/ready")
async def ready():
    """Readiness check endpoint.

    Returns:
        200 with status "ready" when the forwarder is configured,
        503 with status "not_ready" otherwise.
    """
    if webhook_handler is None or not webhook_handler.is_configured:
        return JSONResponse(status_code=503, content={"status": "not_ready"})
    return {"status": "ready"}


@app.get("/metrics")
async def prometheus_metrics():
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(metrics.registry),
        media_type=CONTENT_TYPE_LATEST,
    )


@app.post("/api/github-webhook", response_class=PlainTextResponse)
async def github_webhook(request: Request):
    """GitHub webhook receiver endpoint.

    Authentication is by signature only; the route itself is anonymous.

    Returns:
        PlainTextResponse with the handler's status code and message.
    """
    if webhook_handler is None:
        logger.error("Webhook handler not initialized")
        metrics.record_outcome(WebhookOutcome.NOT_CONFIGURED)
        return PlainTextResponse(NOT_CONFIGURED_MESSAGE, status_code=500)

    result = await webhook_handler.handle(request.headers, request.body)
    return PlainTextResponse(result.body, status_code=result.status_code)


if __name__ == "__main__":
    import uvicorn

    server_settings = ServerSettings()
    logging.getLogger().setLevel(server_settings.log_level)
    uvicorn.run(
        "src.forwarder.main:app",
        host=server_settings.host,
        port=server_settings.port,
        log_level=server_settings.log_level.lower(),
    )
