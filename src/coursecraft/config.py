"""Application configuration.

Configuration is loaded from environment variables. For local development, you can provide a
`.env` file and set `COURSECRAFT_ENV_FILE` to point to it.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from coursecraft.models.mindmap import COPY_SUFFIX, DEFAULT_MODULE_TITLE


class Settings(BaseSettings):
    """Coursecraft settings.

    All fields are environment-configurable. Prefix is `COURSECRAFT_`.
    """

    model_config = SettingsConfigDict(
        env_prefix="COURSECRAFT_",
        env_file=None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Core
    log_level: str = Field(default="INFO")

    # Routing confidence bands
    high_confidence: float = Field(default=0.8, ge=0.0, le=1.0)
    medium_confidence: float = Field(default=0.5, ge=0.0, le=1.0)

    # Tree editing defaults
    default_module_title: str = Field(default=DEFAULT_MODULE_TITLE)
    copy_suffix: str = Field(default=COPY_SUFFIX)
    new_module_hours: float = Field(default=1.0, ge=0.0)
    new_module_difficulty: Literal["beginner", "intermediate", "advanced"] = Field(default="beginner")


def load_settings() -> Settings:
    """Load settings from env.

    Returns:
        Settings: Parsed settings.
    """

    env_file_override = os.getenv("COURSECRAFT_ENV_FILE")
    if env_file_override:
        env_path = Path(env_file_override)
        return Settings(_env_file=env_path)

    default_env = Path.cwd() / ".env"
    if default_env.exists():
        return Settings(_env_file=default_env)

    return Settings()
