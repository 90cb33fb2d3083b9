"""
X/Twitter Client for sponsorship-notify.

This module publishes the sponsorship thank-you post. Publishing is a
two-step sequence against two different API hosts:

1. Upload the image to the v1.1 media endpoint as multipart/form-data and
   read back ``media_id_string``.
2. Create the post on the v2 endpoint with a JSON body that references the
   uploaded media id.

Authentication:
    Both calls are signed with OAuth 1.0a (HMAC-SHA1) using the app's
    consumer key/secret and the account's access token/secret. Signing is
    handled by requests-oauthlib's OAuth1Session, a requests.Session subclass,
    so each TwitterClient owns exactly one authenticated session.

Usage:
    >>> from config import load_credentials
    >>> with TwitterClient(load_credentials(), timeout=30) as client:
    ...     media_id = client.upload_media(image_bytes)
    ...     client.create_post("Thanks!", [media_id])

API Reference:
    Media upload: https://developer.x.com/en/docs/x-api/v1/media/upload-media/api-reference/post-media-upload
    Manage posts: https://developer.x.com/en/docs/x-api/tweets/manage-tweets/api-reference/post-tweets

Security:
    - Credentials are never logged
    - Error messages include the failure reason, not request headers
"""
import json
import logging
from typing import List, Optional, TYPE_CHECKING

import requests
from requests_oauthlib import OAuth1Session

if TYPE_CHECKING:
    from config import Credentials

logger = logging.getLogger(__name__)

UPLOAD_MEDIA_ENDPOINT = "https://upload.twitter.com/1.1/media/upload.json"
MANAGE_TWEET_ENDPOINT = "https://api.twitter.com/2/tweets"


class TwitterAPIError(Exception):
    """Raised when the publish sequence cannot complete.

    Covers transport failures (connection errors, timeouts), undecodable
    upload responses and upload responses without a media id. The original
    exception, if any, is chained as ``__cause__``.
    """
    pass


class TwitterClient:
    """OAuth 1.0a authenticated client for the two publish calls.

    Attributes:
        timeout: Per-request timeout in seconds (None means no timeout)
        session: Authenticated OAuth1Session shared by both calls
    """

    DEFAULT_TIMEOUT = 30  # seconds
    MEDIA_FIELD_NAME = "media"
    MEDIA_CONTENT_TYPE = "application/octet-stream"

    def __init__(self, credentials: "Credentials", timeout: Optional[float] = DEFAULT_TIMEOUT):
        """Build the authenticated session.

        Args:
            credentials: Credentials holding the OAuth 1.0a key pairs
            timeout: Per-request timeout in seconds
        """
        self.timeout = timeout
        self.session = OAuth1Session(
            client_key=credentials.client_token,
            client_secret=credentials.client_secret,
            resource_owner_key=credentials.access_token,
            resource_owner_secret=credentials.access_secret,
        )

    def __enter__(self) -> "TwitterClient":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def close(self) -> None:
        """Release the underlying HTTP connection pool."""
        self.session.close()

    def upload_media(self, data: bytes, filename: str = "image.png") -> str:
        """Upload an image and return its media id.

        Args:
            data: Raw image bytes
            filename: File name sent in the multipart part

        Returns:
            The ``media_id_string`` from the upload response

        Raises:
            TwitterAPIError: On transport failure, a non-JSON response, or a
                response that carries no media id
        """
        files = {self.MEDIA_FIELD_NAME: (filename, data, self.MEDIA_CONTENT_TYPE)}

        try:
            response = self.session.post(UPLOAD_MEDIA_ENDPOINT, files=files, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise TwitterAPIError(f"Media upload request failed: {e}") from e

        logger.debug(f"Media upload responded with HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            raise TwitterAPIError(
                f"Media upload returned a non-JSON response (HTTP {response.status_code})"
            ) from e

        media_id = payload.get("media_id_string") if isinstance(payload, dict) else None
        if not isinstance(media_id, str) or not media_id:
            raise TwitterAPIError(
                f"Media upload response has no media_id_string (HTTP {response.status_code})"
            )

        logger.info(f"Uploaded media {filename} ({len(data)} bytes) as {media_id}")
        return media_id

    def create_post(self, text: str, media_ids: List[str]) -> requests.Response:
        """Create a post that references previously uploaded media.

        The response body is returned as-is and not inspected; only transport
        failures are treated as errors.

        Args:
            text: Post text
            media_ids: Media ids returned by upload_media

        Returns:
            The raw requests.Response

        Raises:
            TwitterAPIError: On transport failure
        """
        body = json.dumps(
            {"text": text, "media": {"media_ids": list(media_ids)}},
            ensure_ascii=False,
        ).encode("utf-8")

        try:
            response = self.session.post(
                MANAGE_TWEET_ENDPOINT,
                data=body,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise TwitterAPIError(f"Post creation request failed: {e}") from e

        if response.ok:
            logger.info(f"Post created with media {media_ids} (HTTP {response.status_code})")
        else:
            logger.warning(f"Post creation responded with HTTP {response.status_code}")
        return response
