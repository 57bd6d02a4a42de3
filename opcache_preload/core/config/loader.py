"""
Configuration loader — reads the ``preload`` section into PreloadConfig.

Two host layouts are understood:

    preload.yml / preload.yaml   section under a top-level ``preload:`` key, or flat
    composer.json                section under ``extra.preload``

The file is located by walking up from the working directory, so commands
can run from any subdirectory of the project.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from opcache_preload.core.errors import ConfigurationError
from opcache_preload.core.models.config import PreloadConfig

logger = logging.getLogger(__name__)

# Searched in this order in every directory
CONFIG_FILES = ("preload.yml", "preload.yaml", "composer.json")


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for a config file starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to the first config file found, or None.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        for name in CONFIG_FILES:
            candidate = current / name
            if candidate.is_file():
                return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def _key_prefix(path: Path) -> str:
    return "extra.preload" if path.suffix == ".json" else "preload"


def _read_section(path: Path) -> object:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot read {path}: {e}") from e

    if path.suffix == ".json":
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"Expected a JSON object in {path}, got {type(data).__name__}")
        extra = data.get("extra")
        return extra.get("preload") if isinstance(extra, dict) else None

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # The YAML may wrap everything under a "preload" key or be flat
    return data["preload"] if "preload" in data else data


def _format_errors(error: ValidationError, prefix: str) -> str:
    parts = []
    for err in error.errors():
        loc = ".".join(str(p) for p in err["loc"])
        parts.append(f'"{prefix}.{loc}": {err["msg"]}')
    return "; ".join(parts)


def load_config(path: Path | None = None) -> PreloadConfig:
    """Load and validate the preload configuration.

    Args:
        path: Explicit config file. If None, searches upward.

    Returns:
        Validated PreloadConfig.

    Raises:
        ConfigurationError: If the file or its preload section is missing or invalid.
    """
    if path is None:
        path = find_config_file()

    if path is None:
        raise ConfigurationError(
            f"No configuration found ({', '.join(CONFIG_FILES)}). "
            "Create one, or specify --config."
        )

    if not path.is_file():
        raise ConfigurationError(f"Config file not found: {path}")

    logger.debug("Loading preload config from %s", path)
    prefix = _key_prefix(path)
    section = _read_section(path)

    if not section:
        where = '"extra" section of ' if path.suffix == ".json" else ""
        raise ConfigurationError(f'"preload" setting is not set in {where}{path.name}.')
    if not isinstance(section, dict):
        raise ConfigurationError('"preload" configuration is invalid.')

    try:
        config = PreloadConfig.model_validate(section)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid preload configuration: {_format_errors(e, prefix)}") from e

    logger.info(
        "Loaded preload config: %d file(s), %d path(s), %d extension(s)",
        len(config.files), len(config.paths), len(config.extensions),
    )
    return config


def project_root(config_path: Path) -> Path:
    """Get the project root directory from a config file path."""
    return config_path.parent.resolve()
