"""Application configuration.

Configuration is loaded from environment variables. For local use you can provide a
`.env` file in the working directory or set `ORGNAV_ENV_FILE` to point to one.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """orgnav settings.

    All fields are environment-configurable. Prefix is `ORGNAV_`.
    """

    model_config = SettingsConfigDict(
        env_prefix="ORGNAV_",
        env_file=None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = Field(default="WARNING")

    # Candidate rendering
    level_marker: str = Field(default="*", min_length=1, max_length=1)

    # Depth windows
    subtree_depth: int = Field(default=1, ge=1, le=50)
    refile_depth: int = Field(default=2, ge=1, le=50)
    # Refile and clock-in searches start from the whole document; when off, refile searches
    # under the parent of the point and clock-in under the point
    refile_targets_whole_document: bool = Field(default=True)

    # Synchronous bridge; None waits forever
    sync_timeout_s: float | None = Field(default=None, gt=0.0)

    # Optional JSONL history of dispatched actions
    history_path: Path | None = Field(default=None)


def load_settings() -> Settings:
    """Load settings from env.

    Returns:
        Settings: Parsed settings.
    """

    env_file_override = os.getenv("ORGNAV_ENV_FILE")
    if env_file_override:
        env_path = Path(env_file_override)
        return Settings(_env_file=env_path)

    default_env = Path.cwd() / ".env"
    if default_env.exists():
        return Settings(_env_file=default_env)

    return Settings()
