"""Operator notifications for sponsorship-notify (Pushover)."""
from .pushover import PushoverNotifier, PushoverLoggingHandler

__all__ = ["PushoverNotifier", "PushoverLoggingHandler"]
