"""
Preload generator — discover the files to compile.

Collects explicit files and recursively scans root directories, applying
the extension whitelist and the exclusion rules (literal path prefixes,
one regex, and a final list of files to drop).

Ordering is deterministic: explicit files first in registration order,
then each root in registration order, walked depth-first with entries
sorted by name. The first registration of a canonical path wins.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator
from pathlib import Path

from opcache_preload.core.errors import ConfigurationError, InvalidPathError, PreloadIOError
from opcache_preload.core.models.preload import FileRecord, PreloadList
from opcache_preload.core.patterns import compile_exclude_regex

logger = logging.getLogger(__name__)


def canonicalize(path: str | Path) -> Path:
    """Absolute path with symlinks, ``.`` and ``..`` resolved."""
    return Path(path).expanduser().resolve()


class PreloadGenerator:
    """Builds a PreloadList from include/exclude rules."""

    def __init__(self) -> None:
        self._files: list[Path] = []
        self._paths: list[Path] = []
        self._exclude_paths: list[str] = []
        self._exclude_regex: re.Pattern[str] | None = None
        self._extensions: set[str] = set()
        self._exclude_files: set[str] = set()

    # ── Registration ────────────────────────────────────────────

    def add_file(self, path: str | Path) -> None:
        """Include a single file, bypassing the extension filter.

        Raises:
            InvalidPathError: If the path is not an existing regular file.
        """
        if not Path(path).is_file():
            raise InvalidPathError(f"File not found or not a regular file: {path}")
        self._files.append(canonicalize(path))
        logger.debug("Added file %s", path)

    def add_path(self, path: str | Path) -> None:
        """Register a root directory for recursive scanning.

        Raises:
            InvalidPathError: If the path is not an existing directory.
        """
        if not Path(path).is_dir():
            raise InvalidPathError(f"Directory not found: {path}")
        self._paths.append(canonicalize(path))
        logger.debug("Added scan root %s", path)

    def add_exclude_path(self, path: str | Path) -> None:
        self._exclude_paths.append(str(canonicalize(path)))
        logger.debug("Excluding prefix %s", path)

    def set_exclude_regex(self, pattern: str | None) -> None:
        """Set (or clear, with None/"") the exclusion regex.

        Raises:
            ConfigurationError: If the pattern does not compile.
        """
        if not pattern:
            self._exclude_regex = None
            return
        try:
            self._exclude_regex = compile_exclude_regex(pattern)
        except (re.error, ValueError) as e:
            raise ConfigurationError(f"Invalid exclude-regex {pattern!r}: {e}") from e
        logger.debug("Excluding regex %s", pattern)

    def add_include_extension(self, extension: str) -> None:
        ext = extension.lstrip(".").lower()
        if ext:
            self._extensions.add(ext)

    def add_exclude_files(self, paths: Iterable[str | Path]) -> None:
        for path in paths:
            self._exclude_files.add(str(canonicalize(path)))

    # ── Matching ────────────────────────────────────────────────

    def is_excluded(self, path: Path) -> bool:
        """True if a canonical path matches an exclude prefix or the regex."""
        if self._has_excluded_prefix(path):
            return True
        return bool(self._exclude_regex and self._exclude_regex.search(str(path)))

    def _has_excluded_prefix(self, path: Path) -> bool:
        candidate = str(path)
        return any(candidate.startswith(prefix) for prefix in self._exclude_paths)

    def _has_allowed_extension(self, path: Path) -> bool:
        return path.suffix[1:].lower() in self._extensions

    def _walk(self, root: Path, visited: set[Path]) -> Iterator[Path]:
        """Yield canonical regular files under root in sorted depth-first order.

        Directories under an exclude prefix are never listed.
        """
        if root in visited:
            logger.debug("Skipping already visited directory %s", root)
            return
        visited.add(root)

        if self._has_excluded_prefix(root):
            logger.debug("Pruned excluded directory %s", root)
            return

        try:
            entries = sorted(root.iterdir(), key=lambda e: e.name)
        except OSError as e:
            raise PreloadIOError(f"Cannot list directory {root}: {e}") from e

        for entry in entries:
            if entry.is_dir():
                yield from self._walk(canonicalize(entry), visited)
            elif entry.is_file():
                yield canonicalize(entry)

    def _scan(self, root: Path, visited: set[Path]) -> Iterator[Path]:
        if not self._extensions:
            logger.warning("No extensions configured, scan of %s finds nothing", root)
            return
        # Filters run on the symlink target, the path that gets recorded
        for candidate in self._walk(root, visited):
            if not self._has_allowed_extension(candidate):
                continue
            if self.is_excluded(candidate):
                logger.debug("Excluded %s", candidate)
                continue
            yield candidate

    # ── Result ──────────────────────────────────────────────────

    def get_list(self) -> PreloadList:
        """Run discovery and return the ordered, deduplicated result."""
        found: dict[str, FileRecord] = {}

        for path in self._files:
            if self.is_excluded(path):
                logger.debug("Excluded explicit file %s", path)
                continue
            found.setdefault(str(path), FileRecord(path))

        visited: set[Path] = set()
        for root in self._paths:
            for path in self._scan(root, visited):
                found.setdefault(str(path), FileRecord(path))

        removed = 0
        for key in self._exclude_files:
            if found.pop(key, None) is not None:
                removed += 1

        logger.info(
            "Discovered %d file(s) from %d file(s) and %d root(s); %d removed by exclude-files",
            len(found), len(self._files), len(self._paths), removed,
        )
        return PreloadList(found.values())
