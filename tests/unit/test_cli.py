"""Unit tests for the hierval CLI."""

import json

import pytest
from typer.testing import CliRunner

from hierval import __version__
from hierval.cli import app

runner = CliRunner()


@pytest.fixture
def config_file(tmp_path, docset, write_json):
    """Config for the on-disk docset with dry-sync disabled."""
    path = tmp_path / ".hierval.json"
    write_json(path, {
        "docset": {
            "repoUrl": "https://github.com/org/docs",
            "docsetName": "learn-docs",
            "docsetPath": str(docset["root"]),
            "manifestFilePath": str(docset["manifest"]),
            "noDrySync": True,
        },
        "logging": {"level": "error"},
    })
    return path


class TestVersion:
    def test_version(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.stdout


class TestValidateCommand:
    """Test the validate command."""

    def test_valid_docset_passes(self, config_file):
        result = runner.invoke(app, ["validate", "--config", str(config_file)])

        assert result.exit_code == 0
        assert "PASS" in result.stdout
        assert "No issues found" in result.stdout

    def test_invalid_hierarchy_fails(self, config_file, docset, write_yaml):
        write_yaml(docset["root"] / "learn/intro/index.yml", {
            "uid": "learn.intro",
            "title": "Introduction",
            "units": ["learn.intro.overview", "learn.intro.gone"],
        })

        result = runner.invoke(app, ["validate", "--config", str(config_file)])

        assert result.exit_code == 1
        assert "FAIL" in result.stdout

    def test_missing_config(self, tmp_path):
        result = runner.invoke(app, ["validate", "--config", str(tmp_path / "nope.json")])

        assert result.exit_code == 1
        assert "Configuration file not found" in result.stdout

    def test_broken_config(self, tmp_path):
        path = tmp_path / ".hierval.json"
        path.write_text("{broken", encoding="utf-8")

        result = runner.invoke(app, ["validate", "--config", str(path)])

        assert result.exit_code == 1
        assert "Invalid JSON" in result.stdout

    def test_invalid_format(self, config_file):
        result = runner.invoke(app, ["validate", "--config", str(config_file), "--format", "xml"])

        assert result.exit_code == 1
        assert "Invalid format 'xml'" in result.stdout

    def test_unreadable_node_manifest(self, config_file, docset):
        docset["manifest"].unlink()

        result = runner.invoke(app, ["validate", "--config", str(config_file)])

        assert result.exit_code == 1
        assert "Error:" in result.stdout

    def test_report_dir_receives_diagnostics(self, config_file, docset, write_yaml, tmp_path):
        write_yaml(docset["root"] / "learn/intro/2-summary.yml", {"uid": "learn.intro.summary"})
        report_dir = tmp_path / "reports"

        result = runner.invoke(app, [
            "validate", "--config", str(config_file), "--report-dir", str(report_dir)
        ])

        assert result.exit_code == 1
        reports = list(report_dir.glob("run-*.json"))
        assert len(reports) == 1
        report = json.loads(reports[0].read_text(encoding="utf-8"))
        assert report["files_with_errors"] == ["learn/intro/2-summary.yml"]

    def test_json_format(self, config_file):
        result = runner.invoke(app, ["validate", "--config", str(config_file), "--format", "json"])

        assert result.exit_code == 0
        assert '"valid": true' in result.stdout


class TestHierarchyCommand:
    """Test the hierarchy command."""

    def test_writes_output_file(self, config_file, tmp_path):
        output = tmp_path / "out" / "hierarchy.json"

        result = runner.invoke(app, ["hierarchy", "--config", str(config_file), "--output", str(output)])

        assert result.exit_code == 0
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["roots"] == ["learn.intro"]
        assert [item["uid"] for item in data["items"]] == [
            "learn.intro", "learn.intro.overview", "learn.intro.summary"
        ]
        assert data["items"][0]["sourceRelativePath"] == "learn/intro/index.yml"

    def test_invalid_structure_exits_nonzero(self, config_file, docset, write_yaml, tmp_path):
        write_yaml(docset["root"] / "learn/intro/1-overview.yml", {"uid": "learn.intro.summary", "title": "Dup"})
        output = tmp_path / "hierarchy.json"

        result = runner.invoke(app, ["hierarchy", "--config", str(config_file), "--output", str(output)])

        assert result.exit_code == 1
        assert "structurally invalid" in result.stdout
        assert not output.exists()
