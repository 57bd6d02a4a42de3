"""
Tests for use cases — run_preload, list_files, check_config.
"""

import json
from pathlib import Path

import pytest

from opcache_preload.core.use_cases.config_check import check_config
from opcache_preload.core.use_cases.preload import list_files, run_preload


def _composer(root: Path, preload: dict) -> Path:
    path = root / "composer.json"
    path.write_text(json.dumps({"name": "acme/app", "extra": {"preload": preload}}))
    return path


@pytest.fixture
def template(php_project: Path) -> Path:
    path = php_project / "template.php"
    path.write_text("BEFORE\n[:opcode:]AFTER\n")
    return path


# ═══════════════════════════════════════════════════════════════════
#  run_preload
# ═══════════════════════════════════════════════════════════════════


class TestRunPreload:
    def test_writes_output(self, php_project: Path, template: Path):
        config = _composer(php_project, {
            "paths": ["src"],
            "extensions": ["php"],
            "exclude": ["src/Legacy"],
            "template": "template.php",
        })
        result = run_preload(config)
        assert result.ok, result.error
        assert result.count == 2
        output = php_project / "vendor" / "preload.php"
        assert result.output_path == output
        content = output.read_text()
        assert content.startswith("BEFORE\n")
        assert content.endswith("AFTER\n")
        assert "Controller.php" in content
        assert "Old.php" not in content

    def test_relative_paths_anchor_at_config_dir(
        self, php_project: Path, template: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ):
        config = _composer(php_project, {
            "files": ["bootstrap.inc"],
            "template": "template.php",
            "export": "build/preload.php",
        })
        monkeypatch.chdir(tmp_path)
        result = run_preload(config)
        assert result.ok, result.error
        assert (php_project / "build" / "preload.php").is_file()
        assert result.count == 1

    def test_exclude_files_applied(self, php_project: Path, template: Path):
        config = _composer(php_project, {
            "paths": ["src"],
            "extensions": ["php"],
            "exclude-files": ["src/Controller.php"],
            "template": "template.php",
        })
        result = run_preload(config)
        assert result.ok, result.error
        assert not any(f.endswith("Controller.php") for f in result.files)

    def test_missing_root_writes_nothing(self, php_project: Path, template: Path):
        config = _composer(php_project, {
            "paths": ["missing"],
            "extensions": ["php"],
            "template": "template.php",
        })
        result = run_preload(config)
        assert not result.ok
        assert "missing" in result.error
        assert not (php_project / "vendor").exists()

    def test_missing_root_keeps_previous_output(self, php_project: Path, template: Path):
        output = php_project / "vendor" / "preload.php"
        output.parent.mkdir()
        output.write_text("previous")
        config = _composer(php_project, {"paths": ["missing"], "template": "template.php"})
        assert not run_preload(config).ok
        assert output.read_text() == "previous"

    def test_missing_template(self, php_project: Path):
        config = _composer(php_project, {"paths": ["src"], "template": "nope.php"})
        result = run_preload(config)
        assert not result.ok
        assert "template" in result.error

    def test_no_status_check_override(self, php_project: Path):
        config = _composer(php_project, {"files": ["bootstrap.inc"]})
        result = run_preload(config, no_status_check=True)
        assert result.ok, result.error
        assert result.template_path is not None
        assert result.template_path.name == "no-status-check.php"
        assert "opcache.enable" not in result.output_path.read_text()

    def test_default_template_has_status_check(self, php_project: Path):
        config = _composer(php_project, {"files": ["bootstrap.inc"]})
        result = run_preload(config)
        assert result.ok, result.error
        assert "opcache.enable" in result.output_path.read_text()

    def test_missing_config(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        isolated = tmp_path / "isolated"
        isolated.mkdir()
        monkeypatch.chdir(isolated)
        result = run_preload()
        assert not result.ok
        assert result.to_dict() == {"error": result.error}

    def test_identical_runs_identical_output(self, php_project: Path, template: Path):
        config = _composer(php_project, {
            "paths": ["."],
            "extensions": ["php", "inc"],
            "exclude": ["vendor"],
            "template": "template.php",
        })
        output = php_project / "vendor" / "preload.php"
        assert run_preload(config).ok
        first = output.read_bytes()
        assert run_preload(config).ok
        assert output.read_bytes() == first


# ═══════════════════════════════════════════════════════════════════
#  list_files
# ═══════════════════════════════════════════════════════════════════


class TestListFiles:
    def test_lists_without_writing(self, php_project: Path):
        config = _composer(php_project, {"paths": ["src"], "extensions": ["php"]})
        result = list_files(config)
        assert result.ok, result.error
        assert result.count == 3
        assert not (php_project / "vendor").exists()

    def test_to_dict(self, php_project: Path):
        config = _composer(php_project, {"files": ["bootstrap.inc"]})
        data = list_files(config).to_dict()
        assert data["count"] == 1
        assert data["files"][0].endswith("bootstrap.inc")


# ═══════════════════════════════════════════════════════════════════
#  check_config
# ═══════════════════════════════════════════════════════════════════


class TestCheckConfig:
    def test_valid(self, php_project: Path):
        config = _composer(php_project, {"paths": ["src"], "extensions": ["php"]})
        result = check_config(config)
        assert result.valid
        assert result.errors == []
        assert result.warnings == []

    def test_missing_paths_are_errors(self, php_project: Path):
        config = _composer(php_project, {"paths": ["nope"], "files": ["gone.php"]})
        result = check_config(config)
        assert not result.valid
        assert len(result.errors) == 2

    def test_warnings(self, php_project: Path):
        config = _composer(php_project, {"paths": ["src"], "exclude": ["nowhere"]})
        result = check_config(config)
        assert result.valid
        assert any("no extensions" in w for w in result.warnings)
        assert any("nowhere" in w for w in result.warnings)

    def test_empty_configuration_warns(self, php_project: Path):
        config = _composer(php_project, {"export": "out.php"})
        result = check_config(config)
        assert result.valid
        assert any("No files or paths" in w for w in result.warnings)

    def test_invalid_config(self, php_project: Path):
        config = _composer(php_project, {"paths": "src"})
        result = check_config(config)
        assert not result.valid
        assert result.to_dict()["valid"] is False
