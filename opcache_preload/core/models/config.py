"""
Preload configuration model — the ``preload`` section, validated once.

Keys use the hyphenated names found in composer.json / preload.yml
(``exclude-regex``, ``no-status-check`` ...); field names work too.
"""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, field_validator

from opcache_preload.core.errors import ConfigurationError
from opcache_preload.core.patterns import compile_exclude_regex

# Bundled templates shipped with the package
TEMPLATES_DIR = Path(__file__).resolve().parents[2] / "templates"
DEFAULT_TEMPLATE = TEMPLATES_DIR / "default.php"
NO_STATUS_CHECK_TEMPLATE = TEMPLATES_DIR / "no-status-check.php"

DEFAULT_EXPORT = "vendor/preload.php"


class PreloadConfig(BaseModel):
    """User configuration for one preload run."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    files: list[StrictStr] = Field(default_factory=list)
    paths: list[StrictStr] = Field(default_factory=list)
    exclude: list[StrictStr] = Field(default_factory=list)
    exclude_files: list[StrictStr] | None = Field(default=None, alias="exclude-files")
    exclude_regex: StrictStr | None = Field(default=None, alias="exclude-regex")
    extensions: list[StrictStr] = Field(default_factory=list)
    no_status_check: StrictBool = Field(default=False, alias="no-status-check")
    export: StrictStr = DEFAULT_EXPORT
    template: StrictStr | None = None

    @field_validator("files", "paths", "exclude", "extensions", mode="before")
    @classmethod
    def _none_is_empty(cls, v):
        return [] if v is None else v

    @field_validator("no_status_check", mode="before")
    @classmethod
    def _none_is_false(cls, v):
        return False if v is None else v

    @field_validator("exclude_regex", "template", mode="before")
    @classmethod
    def _blank_is_unset(cls, v):
        return None if v == "" else v

    @field_validator("export", mode="before")
    @classmethod
    def _blank_export_is_default(cls, v):
        return DEFAULT_EXPORT if v in (None, "") else v

    @field_validator("exclude_regex")
    @classmethod
    def _regex_compiles(cls, v: str | None) -> str | None:
        if v is not None:
            try:
                compile_exclude_regex(v)
            except (re.error, ValueError) as e:
                raise ValueError(f"invalid regular expression: {e}") from e
        return v

    @field_validator("extensions")
    @classmethod
    def _normalize_extensions(cls, v: list[str]) -> list[str]:
        return [ext.lstrip(".").lower() for ext in v if ext.lstrip(".")]

    def resolve_path(self, value: str, project_root: Path) -> Path:
        """Anchor a configured (possibly relative) path at the project root."""
        path = Path(value).expanduser()
        return path if path.is_absolute() else project_root / path

    def export_path(self, project_root: Path) -> Path:
        return self.resolve_path(self.export, project_root)

    def template_path(self, project_root: Path) -> Path:
        """Explicit template, else the bundled one matching ``no-status-check``.

        Raises:
            ConfigurationError: If the template does not exist.
        """
        if self.template is not None:
            path = self.resolve_path(self.template, project_root)
        elif self.no_status_check:
            path = NO_STATUS_CHECK_TEMPLATE
        else:
            path = DEFAULT_TEMPLATE

        if not path.is_file():
            raise ConfigurationError(f'"template" must exist: {path}')
        return path
