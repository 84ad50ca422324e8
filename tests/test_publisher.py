"""Tests for the X/Twitter publisher."""

from __future__ import annotations

import logging
from types import SimpleNamespace

import pytest
import requests
import tweepy

from adapters.publisher import publish_summary
from core.config import Credential

APP = Credential(key="app-key", secret="app-secret")
USER = Credential(key="user-key", secret="user-secret")


class FakeClient:
    instances: list["FakeClient"] = []

    def __init__(self, error: Exception | None = None, **kwargs):
        self.kwargs = kwargs
        self.error = error
        self.posted: list[str] = []
        FakeClient.instances.append(self)

    def create_tweet(self, *, text: str):
        if self.error is not None:
            raise self.error
        self.posted.append(text)
        return SimpleNamespace(data={"id": "1234", "text": text}, errors=[], includes={}, meta={})


@pytest.fixture(autouse=True)
def reset_instances():
    FakeClient.instances = []


def test_posts_summary_with_signed_credentials():
    tweet_id = publish_summary("Daily buggle: 7 (cmake)", app=APP, user=USER, client_factory=FakeClient)

    assert tweet_id == "1234"
    client = FakeClient.instances[0]
    assert client.posted == ["Daily buggle: 7 (cmake)"]
    assert client.kwargs == {
        "consumer_key": "app-key",
        "consumer_secret": "app-secret",
        "access_token": "user-key",
        "access_token_secret": "user-secret",
    }


@pytest.mark.parametrize(
    "error",
    [tweepy.TweepyException("forbidden"), requests.ConnectionError("offline")],
)
def test_failure_is_logged_not_raised(error, caplog):
    caplog.set_level(logging.ERROR, logger="adapters.publisher")

    def factory(**kwargs):
        return FakeClient(error=error, **kwargs)

    assert publish_summary("text", app=APP, user=USER, client_factory=factory) is None
    assert "Posting summary failed" in caplog.text


def test_success_is_logged(caplog):
    caplog.set_level(logging.INFO, logger="adapters.publisher")

    publish_summary("text", app=APP, user=USER, client_factory=FakeClient)

    assert "Posted summary, id=1234" in caplog.text
