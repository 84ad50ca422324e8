"""Tests for settings loading."""

from __future__ import annotations

import pytest

from core.config import ConfigurationError, load_settings, write_user_env_vars
from core.domain.models import OwnerMatch, RunFlags

QUERIES = """
[[queries]]
name = "cmake"
kind = "product"
match = "cmake"

[[queries]]
name = "me"
kind = "owner"
match = "x@y.org"
owner_match = "substring"
"""

AUTH = """
[twitter-app]
key = "app-key"
secret = "app-secret"

[twitter-user]
key = "user-key"
secret = "user-secret"
"""


def test_defaults_are_safe(write_config):
    settings = load_settings(write_config(QUERIES))

    assert settings.run_flags() == RunFlags(verbose=True, dry_run=True, publish=False, concurrent=False)
    assert settings.bugzilla_url == "https://bugs.freebsd.org/bugzilla/"


def test_queries_keep_order_and_options(write_config):
    settings = load_settings(write_config(QUERIES))

    assert [q.name for q in settings.queries] == ["cmake", "me"]
    assert settings.queries[0].match_value == "cmake"
    assert settings.queries[0].owner_match is OwnerMatch.EXACT
    assert settings.queries[1].owner_match is OwnerMatch.SUBSTRING


def test_hyphenated_keys_are_accepted(write_config):
    path = write_config("verbose = false\ndry-run = false\n" + QUERIES)

    settings = load_settings(path)

    assert settings.verbose is False
    assert settings.dry_run is False


def test_unknown_kind_loads(write_config):
    settings = load_settings(write_config('[[queries]]\nname = "x"\nkind = "bogus"\nmatch = "y"\n'))

    assert settings.queries[0].query_kind() is None


def test_missing_file_is_fatal(tmp_path):
    with pytest.raises(ConfigurationError, match="not found"):
        load_settings(tmp_path / "absent.toml")


def test_missing_queries_is_fatal(write_config):
    with pytest.raises(ConfigurationError, match="queries"):
        load_settings(write_config("verbose = true\n"))


def test_unparsable_file_is_fatal(write_config):
    with pytest.raises(ConfigurationError):
        load_settings(write_config("queries = [\n"))


def test_twitter_without_credentials_is_fatal(write_config):
    with pytest.raises(ConfigurationError, match="credentials"):
        load_settings(write_config("twitter = true\n" + QUERIES))


def test_auth_file_supplies_credentials(write_config):
    main = write_config("twitter = true\n" + QUERIES)
    auth = write_config(AUTH, name="buggle-auth.toml")

    settings = load_settings(main, auth)

    assert settings.run_flags().publish is True
    assert settings.twitter_app.key == "app-key"
    assert settings.twitter_user.secret == "user-secret"


def test_overrides_win_and_none_is_ignored(write_config):
    path = write_config("verbose = true\ndry-run = false\n" + QUERIES)

    settings = load_settings(path, verbose=False, dry_run=None)

    assert settings.verbose is False
    assert settings.dry_run is False


def test_environment_overrides_file(write_config, monkeypatch):
    monkeypatch.setenv("BUGGLE_DRY_RUN", "false")

    settings = load_settings(write_config("dry-run = true\n" + QUERIES))

    assert settings.dry_run is False


def test_environment_partially_overrides_hyphenated_table(write_config, monkeypatch):
    monkeypatch.setenv("BUGGLE_TWITTER_APP__SECRET", "override")
    main = write_config("twitter = true\n" + QUERIES)
    auth = write_config(AUTH, name="buggle-auth.toml")

    settings = load_settings(main, auth)

    assert settings.twitter_app.key == "app-key"
    assert settings.twitter_app.secret == "override"
    assert settings.twitter_user.key == "user-key"


def test_long_query_names_load(write_config):
    name = "x" * 300

    settings = load_settings(write_config(f'[[queries]]\nname = "{name}"\nkind = "product"\nmatch = "y"\n'))

    assert settings.queries[0].name == name


def test_user_env_file_supplies_credentials(write_config):
    write_user_env_vars(
        {
            "BUGGLE_TWITTER_APP__KEY": "k1",
            "BUGGLE_TWITTER_APP__SECRET": "s1",
            "BUGGLE_TWITTER_USER__KEY": "k2",
            "BUGGLE_TWITTER_USER__SECRET": "s2",
        }
    )

    settings = load_settings(write_config("twitter = true\n" + QUERIES))

    assert settings.twitter_app.key == "k1"
    assert settings.twitter_user.key == "k2"
