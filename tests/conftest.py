"""
Shared test fixtures and configuration.
"""

import logging
from pathlib import Path

import pytest


@pytest.fixture
def project_root() -> Path:
    """Return the repository root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def php_project(tmp_path: Path) -> Path:
    """Create a small PHP project tree.

    Layout::

        app/
          src/Controller.php
          src/Model.PHP
          src/notes.txt
          src/Legacy/Old.php
          tests/ControllerTest.php
          bootstrap.inc
    """
    root = tmp_path / "app"
    (root / "src" / "Legacy").mkdir(parents=True)
    (root / "tests").mkdir()
    (root / "src" / "Controller.php").write_text("<?php\n")
    (root / "src" / "Model.PHP").write_text("<?php\n")
    (root / "src" / "notes.txt").write_text("notes\n")
    (root / "src" / "Legacy" / "Old.php").write_text("<?php\n")
    (root / "tests" / "ControllerTest.php").write_text("<?php\n")
    (root / "bootstrap.inc").write_text("<?php\n")
    return root


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """Drop handlers the CLI attaches, so later tests don't log to closed streams."""
    yield
    logger = logging.getLogger("opcache_preload")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
