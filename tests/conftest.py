"""
Pytest configuration and shared fixtures for all tests.

This module provides shared fixtures for the test suite, including:
- Test credentials and a small image asset
- A helper that signs bodies the way GitHub does
- Mocked X/Twitter HTTP session (no real network calls)
- Dispatcher and Flask test client wired to the mocked session
"""
import json
from unittest.mock import MagicMock, patch

import pytest

from config import Credentials
from sponsorship_notify.media import MediaAsset
from webhook.dispatcher import NotificationDispatcher
from webhook.signature import compute_signature
from webhook.webhook import create_app

WEBHOOK_SECRET = "It's a Secret to Everybody"
ASSET_BYTES = b"\x89PNG\r\n\x1a\nfake-image-bytes"


@pytest.fixture
def credentials():
    """Credentials with recognisable dummy values."""
    return Credentials(
        client_token="client-token",
        client_secret="client-secret",
        access_token="access-token",
        access_secret="access-secret",
        webhook_secret=WEBHOOK_SECRET,
    )


@pytest.fixture
def asset():
    """Small in-memory image asset."""
    return MediaAsset(data=ASSET_BYTES)


@pytest.fixture
def sign():
    """Return a function that signs a body with the test webhook secret."""
    def _sign(body: bytes, secret: str = WEBHOOK_SECRET) -> str:
        return compute_signature(body, secret)
    return _sign


def make_response(status_code=200, json_data=None, json_error=None):
    """Build a MagicMock that looks like a requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = json_data
    response.text = json.dumps(json_data) if json_data is not None else ""
    return response


@pytest.fixture
def response_factory():
    """Expose make_response to tests."""
    return make_response


@pytest.fixture
def oauth_session():
    """Patch OAuth1Session in the Twitter client and yield the session mock.

    By default the upload returns media id "12345" and the post succeeds.
    Tests override ``session.post.side_effect`` for failure cases.
    """
    with patch("social.twitter_client.OAuth1Session") as mock_session_cls:
        session = mock_session_cls.return_value
        session.post.side_effect = [
            make_response(200, {"media_id_string": "12345"}),
            make_response(201, {"data": {"id": "1", "text": "ok"}}),
        ]
        session.session_cls = mock_session_cls
        yield session


@pytest.fixture
def notifier():
    """Mock PushoverNotifier."""
    return MagicMock()


@pytest.fixture
def dispatcher(credentials, asset, notifier):
    """Dispatcher using the real TwitterClient (pair with oauth_session)."""
    return NotificationDispatcher(credentials, asset, notifier=notifier, timeout=5)


@pytest.fixture
def client(dispatcher):
    """Flask test client for the webhook app."""
    app = create_app(dispatcher)
    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client
