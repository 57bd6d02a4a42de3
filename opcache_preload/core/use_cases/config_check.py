"""
Config check use case — validate the preload configuration and report issues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from opcache_preload.core.config.loader import find_config_file, load_config, project_root
from opcache_preload.core.errors import ConfigurationError
from opcache_preload.core.models.config import PreloadConfig


@dataclass
class ConfigCheckResult:
    """Result of configuration validation."""

    valid: bool = False
    config: PreloadConfig | None = None
    config_path: Path | None = None
    template_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "template_path": str(self.template_path) if self.template_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "file_count": len(self.config.files) if self.config else 0,
            "path_count": len(self.config.paths) if self.config else 0,
            "extensions": self.config.extensions if self.config else [],
        }


def check_config(config_path: Path | None = None) -> ConfigCheckResult:
    """Validate preload configuration and report issues.

    Args:
        config_path: Optional explicit config file.

    Returns:
        ConfigCheckResult with validation status and any issues.
    """
    result = ConfigCheckResult()

    if config_path is None:
        config_path = find_config_file()

    if config_path is None:
        result.errors.append("No preload configuration found.")
        return result

    result.config_path = config_path

    try:
        config = load_config(config_path)
        result.config = config
    except ConfigurationError as e:
        result.errors.append(str(e))
        return result

    root = project_root(config_path)

    try:
        result.template_path = config.template_path(root)
    except ConfigurationError as e:
        result.errors.append(str(e))

    for file in config.files:
        if not config.resolve_path(file, root).is_file():
            result.errors.append(f"File not found or not a regular file: {file}")

    for path in config.paths:
        if not config.resolve_path(path, root).is_dir():
            result.errors.append(f"Directory not found: {path}")

    # Semantic checks
    if not config.files and not config.paths:
        result.warnings.append("No files or paths configured. The preload script will be empty.")

    if config.paths and not config.extensions:
        result.warnings.append("Paths are configured but no extensions. Directory scans will find nothing.")

    for path in config.exclude:
        if not config.resolve_path(path, root).exists():
            result.warnings.append(f"Exclude path does not exist: {path}")

    result.valid = len(result.errors) == 0
    return result
