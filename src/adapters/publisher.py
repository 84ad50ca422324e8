"""X/Twitter publisher.

Posts the summary through the X API v2 (`POST /2/tweets`, JSON body
`{"text": ...}`). `tweepy.Client` signs the request with OAuth 1.0a
(HMAC-SHA1) from the application key/secret and the user access token/secret;
key material is treated as opaque.

Failures are logged and reported as None: by the time this runs the summary
has already been printed. Dry run only covers the Bugzilla queries; an enabled
publisher always posts.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

import requests
import tweepy

from core.config import Credential

logger = logging.getLogger(__name__)

ClientFactory = Callable[..., Any]


def build_client(
    *,
    app: Credential,
    user: Credential,
    client_factory: ClientFactory | None = None,
) -> Any:
    """Return an authenticated client (API v2, user context)."""

    factory = client_factory or tweepy.Client
    return factory(
        consumer_key=app.key,
        consumer_secret=app.secret,
        access_token=user.key,
        access_token_secret=user.secret,
    )


def publish_summary(
    text: str,
    *,
    app: Credential,
    user: Credential,
    client_factory: ClientFactory | None = None,
) -> str | None:
    """Post `text` and return the new tweet id, or None if nothing was posted."""

    try:
        client = build_client(app=app, user=user, client_factory=client_factory)
        response = client.create_tweet(text=text)
    except (tweepy.TweepyException, requests.RequestException) as exc:
        logger.error("Posting summary failed: %s", exc)
        return None

    data = getattr(response, "data", None) or {}
    tweet_id = data.get("id") if isinstance(data, dict) else None
    logger.info("Posted summary, id=%s", tweet_id)
    return str(tweet_id) if tweet_id is not None else None
