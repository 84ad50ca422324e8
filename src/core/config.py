"""Core configuration.

Centralizes every setting (pydantic-settings) so that the CLI and adapters read
configuration the same way.

Sources, highest priority first:
1) explicit overrides (CLI flags)
2) `BUGGLE_*` environment variables
3) `.env` in the working directory, then the per-user `.env`
4) the TOML files: `buggle.toml` (required) and `buggle-auth.toml` (optional)
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

from core.domain.models import QuerySpec, RunFlags

DEFAULT_CONFIG_FILE = Path("buggle.toml")
DEFAULT_AUTH_FILE = Path("buggle-auth.toml")
DEFAULT_BUGZILLA_URL = "https://bugs.freebsd.org/bugzilla/"


class ConfigurationError(Exception):
    """Missing or invalid configuration. Fatal: raised before any query runs."""


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no extra dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "buggle"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "buggle"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "buggle"
    return Path.home() / ".config" / "buggle"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str]) -> Path:
    """Write/update variables in the per-user .env file."""

    env_path = get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# Buggle user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class Credential(BaseModel):
    """A key/secret pair (OAuth consumer or access token)."""

    key: str = Field(..., min_length=1)
    secret: str = Field(..., min_length=1)


class _HyphenatedTomlSource(TomlConfigSettingsSource):
    """TOML source that maps `dry-run` style keys to field names.

    Keys are renamed here, before the sources are merged, so a `[twitter-app]`
    table and `BUGGLE_TWITTER_APP__SECRET` land on the same field.
    """

    def __call__(self) -> dict[str, Any]:
        return {
            (key.replace("-", "_") if isinstance(key, str) else key): value
            for key, value in super().__call__().items()
        }


class AppSettings(BaseSettings):
    """Application settings.

    TOML keys may be written with hyphens (`dry-run`, `[twitter-app]`); they
    are normalized to the field names below.
    """

    model_config = SettingsConfigDict(
        env_prefix="BUGGLE_",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        toml_file=(str(DEFAULT_CONFIG_FILE), str(DEFAULT_AUTH_FILE)),
    )

    verbose: bool = Field(default=True, description="Emit diagnostics on stderr.")
    dry_run: bool = Field(
        default=True,
        description="Build and show queries without sending any request.",
    )
    twitter: bool = Field(default=False, description="Post the summary to X/Twitter.")
    concurrent: bool = Field(
        default=False,
        description="Run queries concurrently (results keep configuration order).",
    )

    queries: list[QuerySpec] = Field(
        ...,
        description="Named queries, in the order they appear in the summary.",
    )

    bugzilla_url: str = Field(
        default=DEFAULT_BUGZILLA_URL,
        min_length=8,
        description="Base URL of the Bugzilla instance (buglist.cgi is appended).",
    )
    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout per request (seconds).",
    )
    user_agent: str = Field(
        default="buggle/0.1 (+https://bugs.freebsd.org/bugzilla/)",
        min_length=1,
        description="User-Agent sent to Bugzilla.",
    )

    twitter_app: Credential | None = Field(
        default=None,
        description="Application (consumer) key and secret.",
    )
    twitter_user: Credential | None = Field(
        default=None,
        description="User access token and secret.",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            _HyphenatedTomlSource(settings_cls),
            file_secret_settings,
        )

    @model_validator(mode="after")
    def _check_publish_credentials(self) -> "AppSettings":
        if self.twitter and (self.twitter_app is None or self.twitter_user is None):
            raise ValueError(
                "twitter is enabled but twitter-app / twitter-user credentials are missing"
            )
        return self

    def run_flags(self) -> RunFlags:
        return RunFlags(
            verbose=self.verbose,
            dry_run=self.dry_run,
            publish=self.twitter,
            concurrent=self.concurrent,
        )


def _describe_validation_error(exc: ValidationError) -> str:
    parts: list[str] = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "settings"
        parts.append(f"{loc}: {err.get('msg', 'invalid value')}")
    return "; ".join(parts)


def load_settings(
    config_file: Path | str | None = None,
    auth_file: Path | str | None = None,
    **overrides: Any,
) -> AppSettings:
    """Load settings from the given TOML files plus env/.env.

    `overrides` whose value is None are ignored, so unset CLI flags fall back
    to the configuration files.

    Raises:
        ConfigurationError: the main file is missing, a file does not parse,
            or the merged values do not validate.
    """

    config_path = Path(config_file) if config_file else DEFAULT_CONFIG_FILE
    auth_path = Path(auth_file) if auth_file else DEFAULT_AUTH_FILE

    if not config_path.is_file():
        raise ConfigurationError(f"configuration file not found: {config_path}")

    class _FileSettings(AppSettings):
        model_config = SettingsConfigDict(
            toml_file=(str(config_path), str(auth_path)),
            env_file=(".env", str(get_user_env_file())),
        )

    init_kwargs = {key: value for key, value in overrides.items() if value is not None}
    try:
        return _FileSettings(**init_kwargs)
    except ValidationError as exc:
        raise ConfigurationError(_describe_validation_error(exc)) from exc
    except ValueError as exc:
        # tomllib.TOMLDecodeError
        raise ConfigurationError(f"cannot parse configuration: {exc}") from exc
