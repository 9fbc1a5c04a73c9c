"""
Tests for CLI commands — run, scan, verify, modules and scaffold.

Everything that would touch the system runs with --mock.
"""

import json
import textwrap
from pathlib import Path

import pytest
from click.testing import CliRunner

from toolprep.core.persistence.audit import AuditWriter
from toolprep.main import cli

PARAMS = ["-p", "git_user_name=Ada Lovelace", "-p", "git_user_email=ada@example.com"]


@pytest.fixture
def config(tmp_path: Path) -> Path:
    path = tmp_path / "toolprep.yml"
    path.write_text(textwrap.dedent("""\
        modules: [requests, rich]
        max_workers: 2
    """))
    return path


class TestCLIGlobal:
    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "prepare a workstation" in result.output

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_invalid_config(self, tmp_path: Path):
        bad = tmp_path / "toolprep.yml"
        bad.write_text("max_workers: 0\n")
        result = CliRunner().invoke(cli, ["--config", str(bad), "scan", "--mock"])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output

    def test_version_pattern_without_group(self, tmp_path: Path):
        bad = tmp_path / "toolprep.yml"
        bad.write_text(textwrap.dedent("""\
            prerequisites:
              - name: git
                kind: command
                version_command: [git, --version]
                version_pattern: 'git version \\d+'
                min_version: "2.0"
        """))
        result = CliRunner().invoke(cli, ["--config", str(bad), "scan", "--mock"])
        assert result.exit_code == 1
        assert "version_pattern" in result.output
        assert result.exception is None or isinstance(result.exception, SystemExit)


class TestRunCommand:
    def test_mock_run_json(self, config: Path):
        args = ["--config", str(config), "run", "--mock", "--yes", "--json", *PARAMS]
        result = CliRunner().invoke(cli, args)
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["status"] == "completed"
        assert data["execution"]["applied"][:3] == ["pip", "package-index", "git"]
        assert data["verification"]["all_ok"] is True
        assert data["verification"]["satisfied"] == data["verification"]["eligible"] == 7

    def test_mock_run_writes_audit(self, config: Path):
        CliRunner().invoke(cli, ["--config", str(config), "run", "--mock", "--yes", *PARAMS])
        entries = AuditWriter(path=config.parent / ".state" / "audit.ndjson").read_all()
        assert len(entries) == 1
        assert entries[0].status == "completed"

    def test_interactive_run(self, config: Path):
        result = CliRunner().invoke(
            cli,
            ["--config", str(config), "run", "--mock"],
            input="y\nAda\nada@example.com\n",
        )
        assert result.exit_code == 0, result.output
        assert "Apply 7 remediation(s)?" in result.output
        assert "7/7 satisfied" in result.output

    def test_declined(self, config: Path):
        result = CliRunner().invoke(cli, ["--config", str(config), "run", "--mock"], input="n\n")
        assert result.exit_code == 3
        assert "Cancelled" in result.output

    def test_dry_run(self, config: Path):
        args = ["--config", str(config), "run", "--mock", "--yes", "--dry-run", *PARAMS]
        result = CliRunner().invoke(cli, args)
        assert result.exit_code == 0
        assert "nothing executed" in result.output
        assert not (config.parent / ".state" / "audit.ndjson").exists()

    def test_unknown_opt_in(self, config: Path):
        args = ["--config", str(config), "run", "--mock", "--yes", "--opt-in", "nope"]
        result = CliRunner().invoke(cli, args)
        assert result.exit_code == 1
        assert "Unknown prerequisite" in result.output

    def test_bad_param(self, config: Path):
        args = ["--config", str(config), "run", "--mock", "-p", "novalue"]
        result = CliRunner().invoke(cli, args)
        assert result.exit_code == 2
        assert "KEY=VALUE" in result.output


class TestScanCommand:
    def test_scan_json(self, config: Path):
        result = CliRunner().invoke(cli, ["--config", str(config), "scan", "--mock", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert len(data["statuses"]) == 11
        assert "git" in data["partition"]["needs_installation"]
        assert "docker" in data["partition"]["optional_unsatisfied"]
        assert data["plan"]["required_params"] == ["git_user_name", "git_user_email"]

    def test_scan_opt_in(self, config: Path):
        args = ["--config", str(config), "scan", "--mock", "--json", "--opt-in", "docker"]
        data = json.loads(CliRunner().invoke(cli, args).output)
        assert "docker" in [item["name"] for item in data["plan"]["items"]]

    def test_scan_text(self, config: Path):
        result = CliRunner().invoke(cli, ["--config", str(config), "scan", "--mock"])
        assert result.exit_code == 0
        assert "Prerequisites" in result.output
        assert "Plan" in result.output


class TestVerifyCommand:
    def test_empty_system_fails(self, config: Path):
        result = CliRunner().invoke(cli, ["--config", str(config), "verify", "--mock", "--json"])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["all_ok"] is False
        assert data["satisfied"] == 0


class TestModulesCommands:
    def test_list_json(self, config: Path):
        result = CliRunner().invoke(cli, ["--config", str(config), "modules", "list", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output) == {"modules": ["requests", "rich"]}

    def test_update_mock(self, config: Path):
        result = CliRunner().invoke(cli, ["--config", str(config), "modules", "update", "--mock"])
        assert result.exit_code == 0, result.output
        assert "2/2 updated" in result.output

    def test_update_selected_json(self, config: Path):
        args = ["--config", str(config), "modules", "update", "--mock", "--json", "-m", "rich"]
        result = CliRunner().invoke(cli, args)
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [m["module"] for m in data["modules"]] == ["rich"]

    def test_update_nothing_configured(self, tmp_path: Path):
        empty = tmp_path / "toolprep.yml"
        empty.write_text("audit: false\n")
        result = CliRunner().invoke(cli, ["--config", str(empty), "modules", "update", "--mock"])
        assert result.exit_code == 1
        assert "No modules" in result.output

    def test_update_without_report_fails(self, config: Path, monkeypatch):
        from toolprep.core.use_cases import update as update_mod

        monkeypatch.setattr(update_mod, "run_update", lambda *a, **kw: update_mod.UpdateResult())
        result = CliRunner().invoke(cli, ["--config", str(config), "modules", "update", "--mock"])
        assert result.exit_code == 1
        assert "no report" in result.output
        assert not isinstance(result.exception, AssertionError)

        args = ["--config", str(config), "modules", "update", "--mock", "--json"]
        result = CliRunner().invoke(cli, args)
        assert result.exit_code == 1
        assert json.loads(result.output) == {}


class TestScaffoldCommand:
    def test_scaffold(self, tmp_path: Path):
        dest = tmp_path / "edge-agent"
        result = CliRunner().invoke(
            cli, ["scaffold", "edge-agent", "--dest", str(dest), "--author", "Ada"],
        )
        assert result.exit_code == 0, result.output
        assert (dest / "manifest.yml").is_file()
        assert (dest / "src" / "edge_agent" / "__init__.py").is_file()

    def test_scaffold_json_skips_existing(self, tmp_path: Path):
        dest = tmp_path / "pkg"
        CliRunner().invoke(cli, ["scaffold", "pkg", "--dest", str(dest)])
        result = CliRunner().invoke(cli, ["scaffold", "pkg", "--dest", str(dest), "--json"])
        data = json.loads(result.output)
        assert data["written"] == []
        assert "README.md" in data["skipped"]

    def test_invalid_name(self, tmp_path: Path):
        result = CliRunner().invoke(cli, ["scaffold", "1bad", "--dest", str(tmp_path / "x")])
        assert result.exit_code == 1
        assert not (tmp_path / "x").exists()
