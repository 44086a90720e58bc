"""
Module: settings

Purpose: Centralized build defaults for page and project generation.

Key Functions:
- get_settings: Cached settings loaded from environment variables
- load_settings: Settings loaded from a YAML file
- BuildSettings: pydantic-settings model with validation

Architecture Notes:
- Environment variables use the ``PLOTPAGES_`` prefix
  (e.g. ``PLOTPAGES_DEFAULT_DATAFORMAT=parquet``)
- YAML files keep their values under a top-level ``plotpages:`` key
- Explicit keyword arguments beat YAML, which beats the environment
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from plotpages.exceptions import ConfigurationError
from plotpages.formats import DataFormat

logger = logging.getLogger(__name__)


class BuildSettings(BaseSettings):
    """Defaults used by the serializer and the builders."""

    model_config = SettingsConfigDict(
        env_prefix="PLOTPAGES_",
        extra="forbid",
        str_strip_whitespace=True,
    )

    default_dataformat: DataFormat = DataFormat.CSV_EMBEDDED
    default_tab_title: str = "plotpages"

    # Embedded datasets beyond this size degrade load time; parquet is advised
    embed_warning_bytes: int = Field(default=50 * 1024 * 1024, gt=0)
    image_warning_bytes: int = Field(default=5 * 1024 * 1024, gt=0)

    json_indent: int | None = Field(default=2, ge=0)
    parquet_compression: str = "snappy"
    write_readme: bool = True

    @field_validator("default_dataformat", mode="before")
    @classmethod
    def _parse_dataformat(cls, value: Any) -> DataFormat:
        try:
            return DataFormat.parse(value)
        except ConfigurationError as e:
            raise ValueError(e.message) from e


@lru_cache(maxsize=1)
def get_settings() -> BuildSettings:
    """Get the process-wide settings (environment variables + defaults)."""
    return BuildSettings()


def load_settings(path: Path | str, **overrides: Any) -> BuildSettings:
    """Load settings from a YAML file.

    Expected YAML format:
    ```yaml
    plotpages:
      default_dataformat: parquet
      json_indent: null
    ```

    Args:
        path: Path to the YAML settings file
        **overrides: Values that take precedence over the file

    Returns:
        Validated BuildSettings

    Raises:
        FileNotFoundError: If the settings file doesn't exist
        ConfigurationError: If the file content is not a mapping
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Settings file {path} must contain a mapping",
            option="settings_file",
            value=str(path),
        )

    section = data.get("plotpages", {}) or {}
    if not isinstance(section, dict):
        raise ConfigurationError(
            f"Invalid 'plotpages' section in {path}, expected a mapping",
            option="plotpages",
            value=type(section).__name__,
        )

    values = {**section, **overrides}
    logger.debug(f"Loaded settings from {path}: {sorted(values)}")
    return BuildSettings(**values)
