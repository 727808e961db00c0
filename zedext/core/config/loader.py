"""
Settings loader — reads the optional zedext config.yml into a Settings model.

The file is optional: without it every value falls back to the defaults
below, which match the public Zed registry. Lookup order:

    --config / $ZEDEXT_CONFIG  >  $XDG_CONFIG_HOME/zedext/config.yml
                               >  ~/.config/zedext/config.yml

Example::

    api_base: https://api.zed.dev
    max_schema_version: 1
    timeout: 30
    extensions_dir: ~/custom/zed/extensions
    retry:
      max_retries: 5
      base_delay: 2
      max_delay: 30
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from zedext.core.errors import ZedExtError

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = "zedext"
CONFIG_FILE_NAME = "config.yml"

DEFAULT_API_BASE = "https://api.zed.dev"
DEFAULT_MAX_SCHEMA_VERSION = 1
DEFAULT_TIMEOUT = 30.0


class ConfigError(ZedExtError):
    """Raised when configuration is invalid or cannot be resolved."""


class RetrySettings(BaseModel):
    """Download retry tuning."""

    max_retries: int = Field(default=5, ge=0)
    base_delay: float = Field(default=2.0, ge=0)
    max_delay: float = Field(default=30.0, ge=0)


class Settings(BaseModel):
    """Process-wide settings, loaded once at startup."""

    api_base: str = DEFAULT_API_BASE
    max_schema_version: int = DEFAULT_MAX_SCHEMA_VERSION
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    extensions_dir: str | None = None
    retry: RetrySettings = Field(default_factory=RetrySettings)


def find_config_file(env: Mapping[str, str] | None = None) -> Path | None:
    """Locate the settings file, or None when there is none."""
    env = os.environ if env is None else env

    explicit = env.get("ZEDEXT_CONFIG")
    if explicit:
        return Path(explicit).expanduser()

    xdg = env.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    candidate = base / CONFIG_DIR_NAME / CONFIG_FILE_NAME
    return candidate if candidate.is_file() else None


def load_settings(path: Path | None = None) -> Settings:
    """Load and validate settings.

    Args:
        path: Explicit path to a config file. Must exist when given.
            If None, the default locations are searched.

    Returns:
        Validated Settings (defaults when no file is found).

    Raises:
        ConfigError: If the file is missing (explicit path) or invalid.
    """
    if path is None:
        path = find_config_file()

    if path is None:
        logger.debug("No config file found — using defaults")
        return Settings()

    # Default locations are only returned when they exist, so a missing
    # file here was asked for explicitly.
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading settings from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return Settings()

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        settings = Settings.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e

    logger.info("Loaded settings from %s (api_base=%s)", path, settings.api_base)
    return settings
