"""
Tests for configuration loading and catalog assembly.
"""

import textwrap
from pathlib import Path

import pytest
import yaml

from toolprep.core.config.catalog_loader import DEFAULT_CATALOG, load_catalog, load_check_specs
from toolprep.core.config.loader import (
    ConfigError,
    config_root,
    find_config_file,
    load_settings,
)
from toolprep.core.errors import CatalogError
from toolprep.core.models.settings import Settings


def _write(path: Path, content: str) -> Path:
    path.write_text(textwrap.dedent(content))
    return path


class TestFindConfigFile:
    def test_in_start_dir(self, tmp_path: Path):
        config = _write(tmp_path / "toolprep.yml", "modules: []\n")
        assert find_config_file(tmp_path) == config.resolve()

    def test_walks_up(self, tmp_path: Path):
        config = _write(tmp_path / "toolprep.yml", "modules: []\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config_file(nested) == config.resolve()


class TestLoadSettings:
    def test_full_file(self, tmp_path: Path):
        path = _write(tmp_path / "toolprep.yml", """\
            require_elevation: true
            package_install: "brew install"
            params:
              git_user_name: Ada
            opt_in: [docker]
            modules: [requests, rich]
            max_workers: 5
        """)
        settings = load_settings(path)
        assert settings.require_elevation
        assert settings.package_install == "brew install"
        assert settings.params == {"git_user_name": "Ada"}
        assert settings.opt_in == ["docker"]
        assert settings.modules == ["requests", "rich"]
        assert settings.max_workers == 5

    def test_empty_file_gives_defaults(self, tmp_path: Path):
        path = _write(tmp_path / "toolprep.yml", "")
        assert load_settings(path) == Settings()

    def test_no_file_gives_defaults(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert load_settings() == Settings()

    def test_explicit_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_settings(tmp_path / "nope.yml")

    def test_invalid_yaml(self, tmp_path: Path):
        path = _write(tmp_path / "toolprep.yml", "modules: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_settings(path)

    def test_not_a_mapping(self, tmp_path: Path):
        path = _write(tmp_path / "toolprep.yml", "- just\n- a list\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_settings(path)

    def test_invalid_values(self, tmp_path: Path):
        path = _write(tmp_path / "toolprep.yml", "max_workers: 0\n")
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_settings(path)

    def test_unknown_check_field_rejected(self, tmp_path: Path):
        path = _write(tmp_path / "toolprep.yml", """\
            prerequisites:
              - name: git
                kind: command
                colour: blue
        """)
        with pytest.raises(ConfigError):
            load_settings(path)

    @pytest.mark.parametrize("pattern", [r"git version \d+\.\d+", r"git version (\d+"])
    def test_bad_version_pattern_rejected(self, tmp_path: Path, pattern: str):
        path = tmp_path / "toolprep.yml"
        path.write_text(yaml.safe_dump({
            "prerequisites": [{
                "name": "git",
                "kind": "command",
                "version_command": ["git", "--version"],
                "version_pattern": pattern,
                "min_version": "2.0",
            }],
        }))
        with pytest.raises(ConfigError, match="version_pattern"):
            load_settings(path)


class TestConfigRoot:
    def test_from_path(self, tmp_path: Path):
        assert config_root(tmp_path / "toolprep.yml") == tmp_path.resolve()

    def test_default_is_cwd(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert config_root(None) == Path.cwd()


class TestCatalogLoading:
    def test_bundled_catalog(self):
        catalog = load_catalog(Settings())
        assert len(catalog) == 11
        assert catalog.names[0] == "privileges"
        assert catalog.position("docker") < catalog.position("docker-compose")

    def test_bundled_specs_valid(self):
        specs = load_check_specs(DEFAULT_CATALOG)
        assert len({s.name for s in specs}) == len(specs)

    def test_install_prefix_applied(self):
        catalog = load_catalog(Settings(package_install="brew install"))
        assert catalog.get("git").render_command({}) == "brew install git"

    def test_catalog_from_settings(self, tmp_path: Path):
        path = _write(tmp_path / "toolprep.yml", """\
            prerequisites:
              - name: jq
                kind: command
                install: "{install} jq"
        """)
        catalog = load_catalog(load_settings(path))
        assert catalog.names == ["jq"]

    def test_forward_reference_rejected(self, tmp_path: Path):
        path = _write(tmp_path / "toolprep.yml", """\
            prerequisites:
              - name: compose
                kind: command
                optional_unless_installed: docker
              - name: docker
                kind: command
        """)
        with pytest.raises(CatalogError):
            load_catalog(load_settings(path))

    def test_bad_catalog_file(self, tmp_path: Path):
        path = _write(tmp_path / "cat.yml", "items: []\n")
        with pytest.raises(ConfigError, match="prerequisites"):
            load_check_specs(path)
