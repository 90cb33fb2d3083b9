"""
Social Media Integration Module for sponsorship-notify.

This module provides the X/Twitter client used to publish thank-you posts.
"""

from .twitter_client import (
    TwitterClient,
    TwitterAPIError,
    UPLOAD_MEDIA_ENDPOINT,
    MANAGE_TWEET_ENDPOINT,
)

__all__ = ['TwitterClient', 'TwitterAPIError', 'UPLOAD_MEDIA_ENDPOINT', 'MANAGE_TWEET_ENDPOINT']
