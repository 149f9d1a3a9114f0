"""Tests for the sanctifier CLI commands."""

import json

import pytest
from typer.testing import CliRunner

from sanctifier.cli import app
from sanctifier.config import DEFAULT_CONFIG_FILENAME

ADD_SOURCE = "pub struct Calc;\n\nimpl Calc {\n    pub fn add(a: u64, b: u64) -> u64 {\n        a + b\n    }\n}\n"

runner = CliRunner()


@pytest.fixture
def project(clean_env):
    """A minimal Cargo project with one contract source and a build dir."""
    (clean_env / "Cargo.toml").write_text('[package]\nname = "calc"\n')
    src = clean_env / "src"
    src.mkdir()
    (src / "lib.rs").write_text(ADD_SOURCE)
    target = clean_env / "target"
    target.mkdir()
    (target / "generated.rs").write_text("fn g() { panic!(\"x\") }\n")
    return clean_env


class TestAnalyzeCommand:
    def test_json_output_for_file(self, clean_env):
        source = clean_env / "lib.rs"
        source.write_text(ADD_SOURCE)
        result = runner.invoke(app, ["analyze", str(source), "--format", "json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["files_scanned"] == 1
        issues = data["files"][0]["arithmetic_issues"]
        assert [i["operation"] for i in issues] == ["+"]
        assert issues[0]["location"].endswith("lib.rs:add:5")

    def test_project_skips_ignored_dirs(self, project):
        result = runner.invoke(app, ["analyze", str(project), "--format", "json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["files_scanned"] == 1
        assert data["files"][0]["path"] == "src/lib.rs"

    def test_limit_option(self, clean_env):
        source = clean_env / "blob.rs"
        source.write_text("#[contracttype]\npub struct Blob {\n    data: Bytes,\n}\n")
        result = runner.invoke(app, ["analyze", str(source), "--format", "json", "--limit", "50"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["ledger_limit"] == 50
        assert data["files"][0]["size_warnings"][0]["level"] == "ExceedsLimit"

    def test_text_output(self, project):
        result = runner.invoke(app, ["analyze", str(project)])
        assert result.exit_code == 0, result.output
        assert "Unchecked arithmetic" in result.stdout

    def test_default_run_reports_storage_collisions(self, clean_env):
        source = clean_env / "keys.rs"
        source.write_text('const A: &str = "k";\nconst B: &str = "k";\n')
        result = runner.invoke(app, ["analyze", str(source), "--format", "json"])
        assert result.exit_code == 0, result.output
        collisions = json.loads(result.stdout)["files"][0]["storage_collisions"]
        assert [c["key_value"] for c in collisions] == ["k", "k"]

    def test_missing_path(self, clean_env):
        result = runner.invoke(app, ["analyze", str(clean_env / "missing")])
        assert result.exit_code == 1

    def test_directory_without_cargo_toml(self, clean_env):
        (clean_env / "docs").mkdir()
        result = runner.invoke(app, ["analyze", str(clean_env / "docs")])
        assert result.exit_code == 1

    def test_unknown_format(self, project):
        result = runner.invoke(app, ["analyze", str(project), "--format", "xml"])
        assert result.exit_code == 2


class TestInitCommand:
    def test_creates_config(self, clean_env):
        result = runner.invoke(app, ["init", str(clean_env)])
        assert result.exit_code == 0, result.output
        assert (clean_env / DEFAULT_CONFIG_FILENAME).is_file()

    def test_existing_config_needs_force(self, clean_env):
        runner.invoke(app, ["init", str(clean_env)])
        result = runner.invoke(app, ["init", str(clean_env)])
        assert result.exit_code == 1
        forced = runner.invoke(app, ["init", str(clean_env), "--force"])
        assert forced.exit_code == 0


class TestComplexityCommand:
    def test_json_metrics(self, project):
        result = runner.invoke(app, ["complexity", str(project), "--format", "json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data[0]["contract_path"] == "src/lib.rs"
        assert data[0]["functions"][0]["name"] == "add"

    def test_text_shows_metrics_only(self, project):
        result = runner.invoke(app, ["complexity", str(project)])
        assert result.exit_code == 0, result.output
        assert "add" in result.stdout
        assert "Unchecked arithmetic" not in result.stdout
