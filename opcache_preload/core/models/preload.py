"""
Preload models — discovered files and the ordered list handed to the writer.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class FileRecord:
    """A discovered source file.

    Attributes:
        path: Absolute canonical path (symlinks and ``..`` resolved).
    """

    path: Path

    @property
    def key(self) -> str:
        """Uniqueness key — the canonical path as a string."""
        return str(self.path)

    @property
    def extension(self) -> str:
        """Lower-cased suffix without the leading dot ("" when none)."""
        return self.path.suffix[1:].lower()


class PreloadList:
    """Ordered, duplicate-free sequence of FileRecords.

    Insertion order is discovery order. The records are materialized, so
    iterating more than once yields the same sequence every time.
    """

    def __init__(self, records: Iterable[FileRecord] = ()) -> None:
        seen: dict[str, FileRecord] = {}
        for record in records:
            seen.setdefault(record.key, record)
        self._records: tuple[FileRecord, ...] = tuple(seen.values())

    def __iter__(self) -> Iterator[FileRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, FileRecord):
            item = item.key
        elif isinstance(item, Path):
            item = str(item)
        return any(r.key == item for r in self._records)

    @property
    def count(self) -> int:
        return len(self._records)

    def paths(self) -> list[Path]:
        return [r.path for r in self._records]

    def to_dict(self) -> dict:
        return {
            "count": self.count,
            "files": [r.key for r in self._records],
        }
