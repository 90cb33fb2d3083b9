"""
Pushover Notification Client for sponsorship-notify.

This module sends operator push notifications via Pushover for events the
webhook service handles:
- A thank-you post was published for a new sponsor
- Publishing the thank-you post failed
- A webhook was rejected because of a bad signature
- Error-level log messages (via PushoverLoggingHandler)

Notifications are best effort: a failed notification is logged and never
changes the webhook response.

Pushover Configuration:
    Configure via config.yml:
    - pushover.enabled: Set to true to enable notifications
    - pushover.app_token_file: Path to Docker secret for app token
    - pushover.user_key_file: Path to Docker secret for user key

Usage:
    >>> from config import load_config
    >>> notifier = PushoverNotifier.from_config(load_config())
    >>> notifier.notify_sponsorship_thanked("octocat", "12345")

API Reference:
    Pushover API: https://pushover.net/api
"""
import os
import logging
import time
from typing import Optional, Dict, Any
import requests


logger = logging.getLogger(__name__)


class PushoverNotifier:
    """Client for sending push notifications via Pushover service.

    Attributes:
        app_token: Pushover application API token
        user_key: Pushover user/group key
        enabled: Whether notifications are enabled (both credentials must be set)
    """

    # Pushover API endpoint
    PUSHOVER_API_URL = "https://api.pushover.net/1/messages.json"

    # Pushover field length limits
    MAX_TITLE_LENGTH = 250
    MAX_MESSAGE_LENGTH = 1024
    MAX_URL_LENGTH = 512
    MAX_URL_TITLE_LENGTH = 100

    def __init__(self, app_token: Optional[str] = None, user_key: Optional[str] = None,
                 config_enabled: bool = True):
        """Initialize Pushover notifier with credentials.

        Args:
            app_token: Pushover application API token. If None, reads from
                      PUSHOVER_APP_TOKEN environment variable.
            user_key: Pushover user/group key. If None, reads from
                     PUSHOVER_USER_KEY environment variable.
            config_enabled: Whether Pushover is enabled in config.yml (default: True)
        """
        self.app_token = app_token or os.environ.get("PUSHOVER_APP_TOKEN")
        self.user_key = user_key or os.environ.get("PUSHOVER_USER_KEY")
        self.enabled = (config_enabled and
                       self.app_token is not None and
                       self.user_key is not None)

        if not config_enabled:
            logger.info("Pushover notifications disabled via config.yml")
        elif not self.enabled:
            logger.warning(
                "Pushover notifications disabled: missing credentials"
            )
        else:
            logger.info("Pushover notifications enabled")

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "PushoverNotifier":
        """Create PushoverNotifier from configuration dictionary.

        Credentials are read from the Docker secret files named in config.yml.

        Args:
            config: Configuration dictionary from config.yml

        Returns:
            Initialized PushoverNotifier instance
        """
        from config import read_secret_file

        pushover_config = config.get("pushover") or {}
        enabled = pushover_config.get("enabled", False)

        if not enabled:
            return cls(config_enabled=False)

        app_token_file = pushover_config.get("app_token_file", "/run/secrets/pushover_app_token")
        user_key_file = pushover_config.get("user_key_file", "/run/secrets/pushover_user_key")

        app_token = read_secret_file(app_token_file)
        user_key = read_secret_file(user_key_file)

        return cls(app_token=app_token, user_key=user_key, config_enabled=True)

    def _send_notification(
        self,
        title: str,
        message: str,
        priority: int = 0,
        url: Optional[str] = None,
        url_title: Optional[str] = None
    ) -> bool:
        """Send a push notification via Pushover API.

        Args:
            title: Notification title (up to 250 characters)
            message: Notification message (up to 1024 characters)
            priority: Priority level (-2 to 2)
            url: Optional URL to include in notification
            url_title: Optional title for the URL

        Returns:
            True if notification sent successfully, False otherwise
        """
        if not self.enabled:
            logger.debug(
                f"Pushover notification skipped (disabled): {title} - {message}"
            )
            return False

        try:
            payload = {
                "token": self.app_token,
                "user": self.user_key,
                "title": title[:self.MAX_TITLE_LENGTH],
                "message": message[:self.MAX_MESSAGE_LENGTH],
                "priority": priority,
            }

            if url:
                payload["url"] = url[:self.MAX_URL_LENGTH]
                if url_title:
                    payload["url_title"] = url_title[:self.MAX_URL_TITLE_LENGTH]

            response = requests.post(
                self.PUSHOVER_API_URL,
                data=payload,
                timeout=10
            )

            response.raise_for_status()

            logger.info(f"Pushover notification sent: {title}")
            return True

        except requests.exceptions.RequestException as e:
            # Logged below ERROR so PushoverLoggingHandler does not loop on itself
            logger.warning(f"Failed to send Pushover notification: {e}")
            return False

    def notify_sponsorship_thanked(self, sponsor: Optional[str], media_id: str) -> bool:
        """Send notification when the thank-you post has been published.

        Args:
            sponsor: GitHub login of the new sponsor, if known
            media_id: Media id the post references

        Returns:
            True if notification sent successfully, False otherwise
        """
        title = "💖 New Sponsor Thanked"
        message = f"Thank-you post published for {sponsor or 'a new sponsor'} (media {media_id})"
        return self._send_notification(
            title=title,
            message=message,
            priority=0,
            url=f"https://github.com/{sponsor}" if sponsor else None,
            url_title="View Sponsor"
        )

    def notify_publish_failure(self, sponsor: Optional[str], error: str) -> bool:
        """Send notification when publishing the thank-you post fails.

        The notification is not retried and nothing is persisted, so this is
        the operator's only signal that a sponsor went unthanked.

        Args:
            sponsor: GitHub login of the new sponsor, if known
            error: Error message describing the failure

        Returns:
            True if notification sent successfully, False otherwise
        """
        title = "❌ Thank-you Post Failed"
        message = f"Failed to publish thank-you post for {sponsor or 'a new sponsor'}\n\nError: {error}"
        return self._send_notification(
            title=title,
            message=message,
            priority=1
        )

    def notify_signature_rejected(self, remote_addr: Optional[str]) -> bool:
        """Send notification when a webhook fails signature verification.

        Args:
            remote_addr: Client address of the rejected request

        Returns:
            True if notification sent successfully, False otherwise
        """
        title = "⚠️ Webhook Signature Rejected"
        message = f"Rejected webhook with invalid X-Hub-Signature-256 from {remote_addr or 'unknown'}"
        return self._send_notification(
            title=title,
            message=message,
            priority=0
        )

    def notify_log_error(self, logger_name: str, message: str, level: str = "ERROR") -> bool:
        """Send notification for error-level log messages.

        Args:
            logger_name: Name of the logger that produced the message
            message: The log message content
            level: Log level (ERROR, CRITICAL, etc.)

        Returns:
            True if notification sent successfully, False otherwise
        """
        title = f"🚨 sponsorship-notify {level}"
        full_message = f"[{logger_name}]\n{message}"
        return self._send_notification(
            title=title,
            message=full_message,
            priority=1
        )


class PushoverLoggingHandler(logging.Handler):
    """Logging handler that sends ERROR and CRITICAL logs to Pushover.

    Rate limited so an error storm produces one notification per window.

    Example:
        >>> handler = PushoverLoggingHandler(notifier, rate_limit_seconds=30)
        >>> logging.getLogger().addHandler(handler)
    """

    def __init__(self, notifier: PushoverNotifier, rate_limit_seconds: int = 60):
        """Initialize the Pushover logging handler.

        Args:
            notifier: PushoverNotifier instance to use for sending notifications
            rate_limit_seconds: Minimum seconds between notifications (default: 60)
        """
        super().__init__()
        self.notifier = notifier
        self.rate_limit_seconds = rate_limit_seconds
        self._last_notification_time: float = 0.0
        self.setLevel(logging.ERROR)

    def emit(self, record: logging.LogRecord) -> None:
        """Send the record to Pushover unless disabled or rate limited."""
        if not self.notifier.enabled:
            return

        current_time = time.time()
        if current_time - self._last_notification_time < self.rate_limit_seconds:
            return

        try:
            message = self.format(record)

            success = self.notifier.notify_log_error(
                logger_name=record.name,
                message=message,
                level=record.levelname
            )

            if success:
                self._last_notification_time = current_time

        except Exception:
            # Don't let notification failures break logging
            self.handleError(record)
