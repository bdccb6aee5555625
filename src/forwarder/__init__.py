"""GitHub pull request forwarder.

This package receives GitHub webhook deliveries, verifies their signatures,
and forwards every opened pull request to an Azure Service Bus queue as a
small JSON message for downstream processing:
- Webhook signature verification and event filtering
- Queue publishing through an injectable publisher
- FastAPI application with health, readiness and metrics endpoints
"""
