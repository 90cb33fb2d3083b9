"""Schema Package - JSON Schema Loading and Validation.

This package loads the JSON schemas used by the webhook service once at
import time and exposes them as module-level constants.

Available Schemas:
    SPONSORSHIP_EVENT_SCHEMA: JSON Schema for GitHub sponsorship webhook
        payloads. It only constrains the fields the service reads
        (action, sender.login, sponsorship.tier.name); every other field
        GitHub sends is accepted.

Usage:
    from schema import SPONSORSHIP_EVENT_SCHEMA
    validate(instance=payload, schema=SPONSORSHIP_EVENT_SCHEMA)
"""
from .schema import SPONSORSHIP_EVENT_SCHEMA

__all__ = ["SPONSORSHIP_EVENT_SCHEMA"]
