"""Harness settings loaded from the environment."""

import tempfile
from pathlib import Path
from typing import Any

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_CIRCLECI_API_URL = "https://circleci.com/api/v2/"


def default_base_tmp_path() -> Path:
    """Staging directory for downloaded artifacts."""
    return Path(tempfile.gettempdir()) / "react-native-tmp"


class RnboxSettings(BaseSettings):
    """Settings with automatic environment variable support.

    Every field can be set with an ``RNBOX_`` prefixed variable. A few fields
    also honour the names the React Native tooling already uses, such as
    ``ANDROID_HOME`` and ``RCT_METRO_PORT``.
    """

    model_config = SettingsConfigDict(
        env_prefix="RNBOX_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    circleci_token: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "circleci_token", "RNBOX_CIRCLECI_TOKEN", "CIRCLE_CI_TOKEN"
        ),
        description="CircleCI personal API token",
    )
    circleci_org: str = Field(default="facebook", description="GitHub organization")
    circleci_repo: str = Field(default="react-native", description="GitHub repository")
    circleci_api_url: str = Field(
        default=DEFAULT_CIRCLECI_API_URL, description="CircleCI v2 API root"
    )

    base_tmp_path: Path = Field(
        default_factory=default_base_tmp_path,
        description="Directory used to stage downloaded artifacts",
    )
    request_timeout: float = Field(
        default=30.0, gt=0, description="Timeout in seconds for CI API requests"
    )

    metro_port: int = Field(
        default=8081,
        validation_alias=AliasChoices("metro_port", "RNBOX_METRO_PORT", "RCT_METRO_PORT"),
        description="Port the Metro bundler listens on",
    )
    android_home: Path | None = Field(
        default=None,
        validation_alias=AliasChoices("android_home", "RNBOX_ANDROID_HOME"),
        description="Android SDK root, used to locate the emulator binary",
    )

    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is recognized."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        upper_v = v.strip().upper()
        if upper_v not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return upper_v

    @field_validator("base_tmp_path", "android_home", mode="before")
    @classmethod
    def expand_path(cls, v: Any) -> Any:
        if isinstance(v, str):
            return Path(v).expanduser() if v.strip() else None
        if isinstance(v, Path):
            return v.expanduser()
        return v


def load_settings(**overrides: Any) -> RnboxSettings:
    """Create settings, letting explicit non-None overrides win over the environment."""
    return RnboxSettings(**{k: v for k, v in overrides.items() if v is not None})
