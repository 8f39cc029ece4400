"""Tests for settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from orgnav.config import Settings, load_settings


def test_load_settings_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """It should read ORGNAV_ prefixed environment variables."""

    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("ORGNAV_ENV_FILE", raising=False)
    monkeypatch.setenv("ORGNAV_REFILE_DEPTH", "3")
    monkeypatch.setenv("ORGNAV_SYNC_TIMEOUT_S", "2.5")

    settings = load_settings()
    assert settings.refile_depth == 3
    assert settings.sync_timeout_s == 2.5
    assert settings.subtree_depth == 1
    assert settings.level_marker == "*"


def test_load_settings_from_env_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """It should honour ORGNAV_ENV_FILE."""

    env = tmp_path / "orgnav.env"
    env.write_text("ORGNAV_LEVEL_MARKER=+\nORGNAV_HISTORY_PATH=hist.jsonl\n", encoding="utf-8")
    monkeypatch.setenv("ORGNAV_ENV_FILE", str(env))

    settings = load_settings()
    assert settings.level_marker == "+"
    assert settings.history_path == Path("hist.jsonl")


def test_settings_reject_zero_depth() -> None:
    """It should refuse depths below one."""

    with pytest.raises(ValidationError):
        Settings(refile_depth=0)
