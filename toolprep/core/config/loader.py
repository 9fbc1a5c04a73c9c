"""
Configuration loader — reads toolprep.yml into a Settings model.

The file is optional. Without one every default applies and the bundled
prerequisite catalog is used.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from toolprep.core.models.settings import Settings

logger = logging.getLogger(__name__)

CONFIG_FILE = "toolprep.yml"


class ConfigError(Exception):
    """Raised when toolprep.yml is unreadable or invalid."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for toolprep.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to toolprep.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def load_settings(path: Path | None = None) -> Settings:
    """Load and validate settings.

    Args:
        path: Explicit path to toolprep.yml. If None, searches upward
            and falls back to defaults when nothing is found.

    Raises:
        ConfigError: An explicit file is missing, or any file is invalid.
    """
    if path is None:
        path = find_config_file()
        if path is None:
            logger.debug("No %s found, using defaults", CONFIG_FILE)
            return Settings()
    elif not path.is_file():
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

    logger.info("Loaded settings from %s", path)
    return settings


def config_root(config_path: Path | None) -> Path:
    """Directory that holds state and audit files."""
    return config_path.parent.resolve() if config_path else Path.cwd()
