"""
Preload use case — configuration → generator → list → writer.

Relative paths in the configuration are anchored at the project root,
the directory holding the config file.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path

from opcache_preload.core.config.loader import find_config_file, load_config, project_root
from opcache_preload.core.errors import ConfigurationError, PreloadError
from opcache_preload.core.models.config import PreloadConfig
from opcache_preload.core.models.preload import PreloadList
from opcache_preload.core.services.generator import PreloadGenerator
from opcache_preload.core.services.writer import PreloadWriter

logger = logging.getLogger(__name__)


@dataclass
class PreloadResult:
    """Result of a preload run (or a discovery-only listing)."""

    config_path: Path | None = None
    output_path: Path | None = None
    template_path: Path | None = None
    count: int = 0
    elapsed: float = 0.0
    files: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
            return result

        result["config_path"] = str(self.config_path) if self.config_path else None
        result["output_path"] = str(self.output_path) if self.output_path else None
        result["template_path"] = str(self.template_path) if self.template_path else None
        result["count"] = self.count
        result["elapsed"] = round(self.elapsed, 4)
        result["files"] = self.files
        return result


def build_generator(config: PreloadConfig, root: Path) -> PreloadGenerator:
    """Register every configured rule on a fresh generator.

    Raises:
        InvalidPathError: If a configured file or directory is missing.
        ConfigurationError: If the exclude regex is invalid.
    """
    generator = PreloadGenerator()

    for file in config.files:
        generator.add_file(config.resolve_path(file, root))

    for path in config.paths:
        generator.add_path(config.resolve_path(path, root))

    for path in config.exclude:
        generator.add_exclude_path(config.resolve_path(path, root))

    generator.set_exclude_regex(config.exclude_regex)

    for extension in config.extensions:
        generator.add_include_extension(extension)

    if config.exclude_files is not None:
        generator.add_exclude_files(config.resolve_path(p, root) for p in config.exclude_files)

    return generator


def _locate(config_path: Path | None) -> Path:
    if config_path is None:
        config_path = find_config_file()
    if config_path is None:
        raise ConfigurationError("No preload configuration found.")
    return config_path


def generate_list(config: PreloadConfig, root: Path) -> PreloadList:
    return build_generator(config, root).get_list()


def list_files(config_path: Path | None = None) -> PreloadResult:
    """Discover files without writing anything.

    Args:
        config_path: Optional explicit config file.

    Returns:
        PreloadResult with the discovered files, or an error.
    """
    result = PreloadResult()
    started = time.perf_counter()

    try:
        result.config_path = _locate(config_path)
        config = load_config(result.config_path)
        preload_list = generate_list(config, project_root(result.config_path))
    except PreloadError as e:
        result.error = str(e)
        return result

    result.count = preload_list.count
    result.files = [record.key for record in preload_list]
    result.elapsed = time.perf_counter() - started
    return result


def run_preload(
    config_path: Path | None = None,
    no_status_check: bool = False,
) -> PreloadResult:
    """Generate the preload script.

    Args:
        config_path: Optional explicit config file.
        no_status_check: Force the template without OPcache status checks.
            Overrides ``no-status-check`` from the config file.

    Returns:
        PreloadResult with the output path and file count, or an error.
        Nothing is written when configuration or discovery fails.
    """
    result = PreloadResult()
    started = time.perf_counter()

    try:
        result.config_path = _locate(config_path)
        config = load_config(result.config_path)
        if no_status_check:
            config = config.model_copy(update={"no_status_check": True})

        root = project_root(result.config_path)
        result.template_path = config.template_path(root)
        result.output_path = config.export_path(root)

        preload_list = generate_list(config, root)
        writer = PreloadWriter(preload_list)
        writer.write(result.output_path, result.template_path)
    except PreloadError as e:
        logger.debug("Preload failed: %s", e)
        result.error = str(e)
        return result

    result.count = writer.get_count()
    result.files = [record.key for record in preload_list]
    result.elapsed = time.perf_counter() - started
    logger.info("Preload script with %d file(s) written to %s", result.count, result.output_path)
    return result
