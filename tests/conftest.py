"""Shared pytest fixtures.

Every test runs in its own temporary working directory with a private user
config directory and no `BUGGLE_*` variables, so local configuration never
leaks into the suite.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable

import pytest

import core.config as config_module
from core.domain.models import QuerySpec, RunFlags


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    for key in list(os.environ):
        if key.upper().startswith("BUGGLE_"):
            monkeypatch.delenv(key, raising=False)
    user_dir = tmp_path / "user-config"
    monkeypatch.setattr(config_module, "get_user_config_dir", lambda: user_dir)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[..., Path]:
    def _write(text: str, name: str = "buggle.toml") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def live_flags() -> RunFlags:
    return RunFlags(verbose=False, dry_run=False, publish=False)


def make_spec(name: str, kind: str = "product", match: str | None = None, **extra: object) -> QuerySpec:
    return QuerySpec(name=name, kind=kind, match=match if match is not None else name, **extra)
