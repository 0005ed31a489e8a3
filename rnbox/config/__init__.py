"""Configuration for rnbox."""

from .settings import (
    DEFAULT_CIRCLECI_API_URL,
    RnboxSettings,
    default_base_tmp_path,
    load_settings,
)


__all__ = [
    "DEFAULT_CIRCLECI_API_URL",
    "RnboxSettings",
    "default_base_tmp_path",
    "load_settings",
]
