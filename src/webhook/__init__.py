"""GitHub Sponsors Webhook Receiver Package.

This package receives GitHub sponsorship webhooks, verifies their
X-Hub-Signature-256 HMAC signature, and publishes a thank-you post when a
new sponsorship is created.

Key Components:
    create_app: Flask application factory
    NotificationDispatcher: verification, decoding and publish sequence
    verify_signature: HMAC-SHA256 signature check

Endpoints:
    POST /: Receives sponsorship webhooks
    GET /health: Health check endpoint for monitoring

Usage:
    Start the server through the console script:
        $ sponsorship-notify

    Send a signed test delivery:
        $ python scripts/send_test_webhook.py --action created
"""
from .dispatcher import DispatchResult, NotificationDispatcher, SponsorshipEvent
from .signature import compute_signature, verify_signature
from .webhook import create_app

__all__ = [
    "create_app",
    "NotificationDispatcher",
    "DispatchResult",
    "SponsorshipEvent",
    "compute_signature",
    "verify_signature",
]
