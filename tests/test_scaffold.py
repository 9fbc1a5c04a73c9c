"""
Tests for the deployment-package scaffolder.
"""

import ast
import tomllib

import pytest
import yaml

from toolprep.core.errors import ScaffoldError
from toolprep.core.models.template import PackageSpec
from toolprep.core.services.scaffold import render_package, render_text, write_package


@pytest.fixture
def spec():
    return PackageSpec(name="Edge-Agent", version="1.2.0", author="Ada", description="Edge agent")


class TestRenderText:
    def test_tokens(self):
        assert render_text("{{name}} v{{ version }}", {"name": "x", "version": "1"}) == "x v1"

    def test_unknown_token(self):
        with pytest.raises(ScaffoldError, match="nope"):
            render_text("{{nope}}", {})

    def test_single_braces_untouched(self):
        assert render_text("{name}", {"name": "x"}) == "{name}"


class TestRenderPackage:
    def test_files(self, spec):
        paths = [f.path for f in render_package(spec, year=2026)]
        assert "manifest.yml" in paths
        assert "pyproject.toml" in paths
        assert "src/edge_agent/__init__.py" in paths
        assert "tests/test_edge_agent.py" in paths

    def test_content(self, spec):
        files = {f.path: f.content for f in render_package(spec, year=2026)}
        assert 'version: "1.2.0"' in files["manifest.yml"]
        assert '__version__ = "1.2.0"' in files["src/edge_agent/__init__.py"]
        assert "from edge_agent import __version__" in files["tests/test_edge_agent.py"]
        assert files["NOTICE"] == "Copyright (c) 2026 Ada\n"
        assert "{{" not in "".join(files.values())

    def test_defaults(self):
        files = {f.path: f.content for f in render_package(PackageSpec(name="svc"), year=2026)}
        assert 'description: "svc deployment package"' in files["manifest.yml"]
        assert "unknown" in files["NOTICE"]

    def test_deterministic(self, spec):
        assert render_package(spec, year=2026) == render_package(spec, year=2026)

    def test_quotes_and_backslashes_survive_parsing(self):
        description = 'Deploys the "edge" tier \\ with """ quotes'
        author = 'Ada "Countess" Lovelace'
        spec = PackageSpec(name="edge", author=author, description=description)
        files = {f.path: f.content for f in render_package(spec, year=2026)}

        project = tomllib.loads(files["pyproject.toml"])["project"]
        assert project["description"] == description
        assert project["authors"] == [{"name": author}]

        manifest = yaml.safe_load(files["manifest.yml"])
        assert manifest["description"] == description
        assert manifest["author"] == author

        module = ast.parse(files["src/edge/__init__.py"])
        assert ast.get_docstring(module) == f"edge \u2014 {description}"
        ast.parse(files["tests/test_edge.py"])

        assert description in files["README.md"]


class TestWritePackage:
    def test_writes_tree(self, spec, tmp_path):
        result = write_package(render_package(spec), tmp_path / "pkg")
        assert (tmp_path / "pkg" / "src" / "edge_agent" / "__init__.py").is_file()
        assert len(result.written) == 7
        assert result.skipped == []

    def test_existing_files_kept(self, spec, tmp_path):
        dest = tmp_path / "pkg"
        dest.mkdir()
        (dest / "README.md").write_text("mine")

        result = write_package(render_package(spec), dest)

        assert (dest / "README.md").read_text() == "mine"
        assert result.skipped == ["README.md"]

    def test_force_overwrites(self, spec, tmp_path):
        dest = tmp_path / "pkg"
        dest.mkdir()
        (dest / "README.md").write_text("mine")

        result = write_package(render_package(spec), dest, force=True)

        assert (dest / "README.md").read_text().startswith("# Edge-Agent")
        assert result.skipped == []
