"""
Sponsorship Notification Dispatcher.

Turns one inbound GitHub sponsorship webhook into a DispatchResult:

    signature present -> body read -> signature valid -> event decoded
        -> action == "created" ? publish sequence : no-op -> 200 OK

Each step either continues or stops with a terminal result; the first
failure wins and is mapped to an HTTP status here, in one place, so the
Flask route only has to render it.

Publish sequence:
    A fresh TwitterClient is built for every notification. The bundled
    image is uploaded first and the post is created with the media id from
    that same upload. Any failure in the sequence is fatal for the
    notification: nothing is retried, queued or persisted.
"""
import json
import logging
from dataclasses import dataclass
from typing import Any, BinaryIO, Callable, Dict, Optional, Union, TYPE_CHECKING

from jsonschema import Draft7Validator, ValidationError
from werkzeug.exceptions import ClientDisconnected

from schema import SPONSORSHIP_EVENT_SCHEMA
from social.twitter_client import TwitterClient, TwitterAPIError
from webhook.signature import SIGNATURE_HEADER, verify_signature

if TYPE_CHECKING:
    from config import Credentials
    from notifications.pushover import PushoverNotifier
    from sponsorship_notify.media import MediaAsset

logger = logging.getLogger(__name__)

THANK_YOU_TEXT = "ありがとうございます 🤗 #GitHubSponsors"
CREATED_ACTION = "created"

validator = Draft7Validator(SPONSORSHIP_EVENT_SCHEMA)


class SponsorshipEventDecodeError(Exception):
    """Raised when a webhook body is not a valid sponsorship event."""
    pass


@dataclass(frozen=True)
class SponsorshipEvent:
    """Decoded view of a sponsorship webhook payload."""
    action: Optional[str] = None
    sponsor_login: Optional[str] = None
    tier_name: Optional[str] = None


@dataclass(frozen=True)
class DispatchResult:
    """Terminal outcome of handling one webhook delivery."""
    status_code: int
    message: str

    @property
    def ok(self) -> bool:
        return self.status_code == 200


RESULT_OK = DispatchResult(200, "OK")
RESULT_MISSING_SIGNATURE = DispatchResult(403, f"Missing {SIGNATURE_HEADER}")
RESULT_UNREADABLE_BODY = DispatchResult(400, "Failed to read request body")
RESULT_WRONG_SIGNATURE = DispatchResult(403, "Wrong signature")
RESULT_DECODE_FAILURE = DispatchResult(400, "Failed to parse request body")
RESULT_PUBLISH_FAILURE = DispatchResult(400, "Failed to send notify")


def _get_nested(payload: Dict[str, Any], *keys: str) -> Optional[Any]:
    current: Any = payload
    for key in keys:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def decode_sponsorship_event(raw_body: bytes) -> SponsorshipEvent:
    """Decode a webhook body into a SponsorshipEvent.

    A syntactically valid object without ``action`` decodes to an event with
    ``action=None``; that is "no action", not an error.

    Raises:
        SponsorshipEventDecodeError: If the body is not JSON, not UTF-8, nested
            too deeply to decode, or does not have the expected shape
    """
    try:
        payload = json.loads(raw_body)
    except (ValueError, RecursionError) as e:
        raise SponsorshipEventDecodeError(f"Invalid JSON: {e}") from e

    try:
        validator.validate(payload)
    except ValidationError as e:
        path_str = ".".join(str(p) for p in e.path)
        raise SponsorshipEventDecodeError(
            f"Schema validation failed: {e.message} at path: {path_str}"
        ) from e
    except RecursionError as e:
        raise SponsorshipEventDecodeError("Payload is nested too deeply") from e

    if payload is None:
        return SponsorshipEvent()

    return SponsorshipEvent(
        action=payload.get("action"),
        sponsor_login=_get_nested(payload, "sender", "login")
        or _get_nested(payload, "sponsorship", "sponsor", "login"),
        tier_name=_get_nested(payload, "sponsorship", "tier", "name"),
    )


class NotificationDispatcher:
    """Verifies, decodes and acts on sponsorship webhooks.

    The dispatcher holds only read-only state, so one instance is shared by
    all concurrent requests.

    Attributes:
        credentials: Webhook secret and OAuth 1.0a secrets
        asset: Image attached to every thank-you post
        client_factory: Callable building a TwitterClient from (credentials, timeout)
        notifier: Optional PushoverNotifier for operator notifications
        timeout: Per-request timeout for outbound calls, in seconds
    """

    def __init__(
        self,
        credentials: "Credentials",
        asset: "MediaAsset",
        client_factory: Callable[..., TwitterClient] = TwitterClient,
        notifier: Optional["PushoverNotifier"] = None,
        timeout: Optional[float] = TwitterClient.DEFAULT_TIMEOUT,
    ):
        self.credentials = credentials
        self.asset = asset
        self.client_factory = client_factory
        self.notifier = notifier
        self.timeout = timeout

    def handle(
        self,
        body: Union[bytes, BinaryIO],
        signature_header: Optional[str],
        remote_addr: Optional[str] = None,
    ) -> DispatchResult:
        """Handle one webhook delivery.

        Args:
            body: Raw request body, or a stream it can be read from. A stream
                is only read once the signature header is known to be present.
            signature_header: Value of the X-Hub-Signature-256 header
            remote_addr: Client address, used for logging only

        Returns:
            DispatchResult with the HTTP status and plain-text message
        """
        if not signature_header:
            logger.warning(f"Rejected webhook from {remote_addr}: missing {SIGNATURE_HEADER}")
            return RESULT_MISSING_SIGNATURE

        if isinstance(body, (bytes, bytearray)):
            raw_body = bytes(body)
        else:
            try:
                raw_body = body.read()
            except (OSError, ClientDisconnected) as e:
                logger.error(f"Failed to read webhook body from {remote_addr}: {e}")
                return RESULT_UNREADABLE_BODY

        if not verify_signature(raw_body, signature_header, self.credentials.webhook_secret):
            logger.warning(f"Rejected webhook from {remote_addr}: wrong signature")
            if self.notifier:
                self.notifier.notify_signature_rejected(remote_addr)
            return RESULT_WRONG_SIGNATURE

        try:
            event = decode_sponsorship_event(raw_body)
        except SponsorshipEventDecodeError as e:
            logger.error(f"Failed to parse webhook body: {e}")
            return RESULT_DECODE_FAILURE

        logger.info(
            f"Received sponsorship event: action={event.action!r}, "
            f"sponsor={event.sponsor_login!r}, tier={event.tier_name!r}"
        )

        if event.action != CREATED_ACTION:
            logger.debug(f"Ignoring sponsorship action {event.action!r}")
            return RESULT_OK

        try:
            media_id = self.publish()
        except TwitterAPIError as e:
            # Below ERROR: notify_publish_failure is the alert for this
            logger.warning(f"Failed to publish thank-you post for {event.sponsor_login!r}: {e}")
            if self.notifier:
                self.notifier.notify_publish_failure(event.sponsor_login, str(e))
            return RESULT_PUBLISH_FAILURE

        if self.notifier:
            self.notifier.notify_sponsorship_thanked(event.sponsor_login, media_id)
        return RESULT_OK

    def publish(self) -> str:
        """Run the upload-then-post sequence once.

        Returns:
            The media id the new post references

        Raises:
            TwitterAPIError: If either call fails; the post is never created
                when the upload fails
        """
        with self.client_factory(self.credentials, timeout=self.timeout) as client:
            media_id = client.upload_media(self.asset.data, self.asset.filename)
            client.create_post(THANK_YOU_TEXT, [media_id])
        logger.info(f"Published thank-you post with media {media_id}")
        return media_id
