"""
Preload writer — render priming statements into a template and write it.

One ``opcache_compile_file('<path>');`` line per record, substituted for
the ``[:opcode:]`` placeholder. Writes are atomic (write to temp file,
then rename) so a failed run leaves the previous output in place.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from opcache_preload.core.errors import PreloadIOError, StateError
from opcache_preload.core.models.preload import PreloadList

logger = logging.getLogger(__name__)

PLACEHOLDER = "[:opcode:]"

# Single-quoted PHP literals only interpret \\ and \'
_ESCAPES = str.maketrans({"\\": "\\\\", "'": "\\'"})


def escape_php_string(value: str) -> str:
    """Escape a value for a single-quoted PHP string literal."""
    return value.translate(_ESCAPES)


def priming_statement(path: Path | str) -> str:
    return f"opcache_compile_file('{escape_php_string(str(path))}');\n"


class PreloadWriter:
    """Renders a PreloadList and writes the preload script."""

    def __init__(self, preload_list: PreloadList) -> None:
        self._list = preload_list
        self._count: int | None = None

    def render(self) -> str:
        """Render the statement block and record how many files it holds."""
        lines = [priming_statement(record.path) for record in self._list]
        self._count = len(lines)
        return "".join(lines)

    def render_template(self, template: str) -> str:
        if PLACEHOLDER not in template:
            logger.warning("Template has no %s placeholder; no files will be compiled", PLACEHOLDER)
        return template.replace(PLACEHOLDER, self.render())

    def write(self, output_path: str | Path, template_path: str | Path) -> Path:
        """Render into the template and write the result to output_path.

        Raises:
            PreloadIOError: If the template cannot be read or the output
                cannot be written.
        """
        output = Path(output_path)
        template = Path(template_path)

        try:
            layout = template.read_text(encoding="utf-8")
        except OSError as e:
            raise PreloadIOError(f"Cannot read template {template}: {e}") from e

        content = self.render_template(layout)

        try:
            output.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=output.parent,
                prefix=".preload_",
                suffix=".tmp",
            )
            tmp = Path(tmp_name)
            try:
                with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as fh:
                    fh.write(content)
                # mkstemp creates 0600; the PHP runtime user must read it
                tmp.chmod(0o644)
                tmp.replace(output)
            except Exception:
                tmp.unlink(missing_ok=True)
                raise
        except OSError as e:
            raise PreloadIOError(f"Error writing the preload file {output}: {e}") from e

        logger.debug("Preload script written to %s (%d files)", output, self._count)
        return output

    def get_count(self) -> int:
        """Number of rendered files.

        Raises:
            StateError: If nothing has been rendered yet.
        """
        if self._count is None:
            raise StateError("File count is not available until the list is rendered.")
        return self._count

    @property
    def count(self) -> int:
        return self.get_count()
