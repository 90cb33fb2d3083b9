"""
Unit Tests for the X/Twitter Client.

All tests patch OAuth1Session, so no real network calls are made.

Running Tests:
    $ pytest tests/test_twitter_client.py -v
"""
import json

import pytest
import requests

from social.twitter_client import (
    MANAGE_TWEET_ENDPOINT,
    UPLOAD_MEDIA_ENDPOINT,
    TwitterAPIError,
    TwitterClient,
)


class TestTwitterClientInit:
    """Tests for session construction and lifecycle."""

    def test_session_uses_oauth1_credentials(self, oauth_session, credentials):
        client = TwitterClient(credentials, timeout=10)

        oauth_session.session_cls.assert_called_once_with(
            client_key="client-token",
            client_secret="client-secret",
            resource_owner_key="access-token",
            resource_owner_secret="access-secret",
        )
        assert client.timeout == 10
        assert client.session is oauth_session

    def test_default_timeout(self, oauth_session, credentials):
        assert TwitterClient(credentials).timeout == TwitterClient.DEFAULT_TIMEOUT

    def test_context_manager_closes_session(self, oauth_session, credentials):
        with TwitterClient(credentials) as client:
            assert isinstance(client, TwitterClient)
            oauth_session.close.assert_not_called()

        oauth_session.close.assert_called_once()

    def test_context_manager_closes_session_on_error(self, oauth_session, credentials):
        with pytest.raises(TwitterAPIError):
            with TwitterClient(credentials) as client:
                raise TwitterAPIError("boom")

        oauth_session.close.assert_called_once()


class TestUploadMedia:
    """Tests for TwitterClient.upload_media()."""

    def test_upload_sends_multipart_media_part(self, oauth_session, credentials):
        client = TwitterClient(credentials, timeout=12)

        media_id = client.upload_media(b"png-bytes", "thanks.png")

        assert media_id == "12345"
        oauth_session.post.assert_called_once_with(
            UPLOAD_MEDIA_ENDPOINT,
            files={"media": ("thanks.png", b"png-bytes", "application/octet-stream")},
            timeout=12,
        )

    def test_default_filename(self, oauth_session, credentials):
        TwitterClient(credentials).upload_media(b"png-bytes")

        files = oauth_session.post.call_args.kwargs["files"]
        assert files["media"][0] == "image.png"

    def test_upload_status_is_not_checked(self, oauth_session, credentials, response_factory):
        """A media id is the success signal, whatever the HTTP status."""
        oauth_session.post.side_effect = [response_factory(202, {"media_id_string": "777"})]

        assert TwitterClient(credentials).upload_media(b"x") == "777"

    @pytest.mark.parametrize("error", [
        requests.exceptions.ConnectionError("refused"),
        requests.exceptions.Timeout("timed out"),
        requests.exceptions.SSLError("bad certificate"),
    ])
    def test_transport_errors_raise(self, oauth_session, credentials, error):
        oauth_session.post.side_effect = error

        with pytest.raises(TwitterAPIError, match="Media upload request failed") as exc_info:
            TwitterClient(credentials).upload_media(b"x")

        assert exc_info.value.__cause__ is error

    def test_non_json_response_raises(self, oauth_session, credentials, response_factory):
        oauth_session.post.side_effect = [
            response_factory(503, json_error=ValueError("Expecting value")),
        ]

        with pytest.raises(TwitterAPIError, match="non-JSON response \\(HTTP 503\\)"):
            TwitterClient(credentials).upload_media(b"x")

    @pytest.mark.parametrize("payload", [
        {},
        {"media_id": 12345},
        {"media_id_string": ""},
        {"media_id_string": 12345},
        [],
        None,
    ])
    def test_missing_media_id_raises(self, oauth_session, credentials, response_factory, payload):
        oauth_session.post.side_effect = [response_factory(200, payload)]

        with pytest.raises(TwitterAPIError, match="no media_id_string"):
            TwitterClient(credentials).upload_media(b"x")


class TestCreatePost:
    """Tests for TwitterClient.create_post()."""

    def test_post_body_and_headers(self, oauth_session, credentials, response_factory):
        oauth_session.post.side_effect = [response_factory(201, {"data": {"id": "1"}})]

        response = TwitterClient(credentials, timeout=3).create_post("hello", ["1", "2"])

        assert response.status_code == 201
        args, kwargs = oauth_session.post.call_args
        assert args == (MANAGE_TWEET_ENDPOINT,)
        assert kwargs["headers"] == {"Content-Type": "application/json"}
        assert kwargs["timeout"] == 3
        assert json.loads(kwargs["data"]) == {"text": "hello", "media": {"media_ids": ["1", "2"]}}

    def test_non_ascii_text_is_sent_as_utf8(self, oauth_session, credentials, response_factory):
        oauth_session.post.side_effect = [response_factory(201, {})]
        text = "ありがとうございます 🤗 #GitHubSponsors"

        TwitterClient(credentials).create_post(text, ["1"])

        data = oauth_session.post.call_args.kwargs["data"]
        assert isinstance(data, bytes)
        assert text.encode("utf-8") in data
        assert b"\\u" not in data

    def test_error_status_is_returned_not_raised(self, oauth_session, credentials, response_factory):
        oauth_session.post.side_effect = [response_factory(401, {"title": "Unauthorized"})]

        response = TwitterClient(credentials).create_post("hello", ["1"])

        assert response.status_code == 401

    def test_transport_error_raises(self, oauth_session, credentials):
        oauth_session.post.side_effect = requests.exceptions.ReadTimeout("slow")

        with pytest.raises(TwitterAPIError, match="Post creation request failed"):
            TwitterClient(credentials).create_post("hello", ["1"])
