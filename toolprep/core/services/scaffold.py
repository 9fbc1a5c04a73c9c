"""
Deployment-package scaffolder — render a new package from text templates.

Templates use ``{{token}}`` placeholders. Every token must be known;
an unknown token is a template bug and raises ``ScaffoldError``.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from toolprep.core.errors import ScaffoldError
from toolprep.core.models.template import GeneratedFile, PackageSpec

logger = logging.getLogger(__name__)

_TOKEN = re.compile(r"\{\{\s*([a-z_]+)\s*\}\}")


# ── Templates ───────────────────────────────────────────────────


_MANIFEST = """\
# Deployment manifest for {{name}}
name: {{name}}
version: "{{version}}"
author: "{{author}}"
description: "{{description}}"
entrypoint: src/{{module}}/__init__.py
requires:
  - python>=3.11
"""

_README = """\
# {{name}}

{{description}}

## Install

```bash
pip install .
```

## Release

1. Bump `version` in `manifest.yml` and `pyproject.toml`.
2. Add an entry to `CHANGELOG.md`.
3. Tag the release: `git tag v{{version}}`.
"""

_CHANGELOG = """\
# Changelog

## {{version}}

- Initial release.
"""

_PYPROJECT = """\
[build-system]
requires = ["setuptools>=68"]
build-backend = "setuptools.build_meta"

[project]
name = "{{name}}"
version = "{{version}}"
description = "{{description}}"
authors = [{ name = "{{author}}" }]
requires-python = ">=3.11"

[tool.setuptools.packages.find]
where = ["src"]
"""

_INIT = '''\
"""{{name}} — {{description}}"""

__version__ = "{{version}}"
'''

_TEST = """\
from {{module}} import __version__


def test_version():
    assert __version__ == "{{version}}"
"""

_LICENSE_NOTE = """\
Copyright (c) {{year}} {{author}}
"""

# (path, template, reason, values sit inside double-quoted strings)
_FILES: tuple[tuple[str, str, str, bool], ...] = (
    ("manifest.yml", _MANIFEST, "deployment manifest", True),
    ("README.md", _README, "package overview", False),
    ("CHANGELOG.md", _CHANGELOG, "release notes", False),
    ("pyproject.toml", _PYPROJECT, "build metadata", True),
    ("src/{{module}}/__init__.py", _INIT, "package entrypoint", True),
    ("tests/test_{{module}}.py", _TEST, "smoke test", True),
    ("NOTICE", _LICENSE_NOTE, "copyright notice", False),
)


# ── Rendering ───────────────────────────────────────────────────


@dataclass
class ScaffoldResult:
    """Paths written and skipped under the destination."""

    root: Path
    written: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"root": str(self.root), "written": self.written, "skipped": self.skipped}


def render_text(template: str, values: dict[str, str]) -> str:
    """Substitute ``{{token}}`` placeholders.

    Raises:
        ScaffoldError: The template uses a token with no value.
    """

    def _sub(match: re.Match[str]) -> str:
        key = match.group(1)
        if key not in values:
            raise ScaffoldError(f"Unknown template token: {key}")
        return values[key]

    return _TOKEN.sub(_sub, template)


def quote_value(value: str) -> str:
    """Escape a value for a double-quoted YAML, TOML or Python string.

    The three formats share JSON's backslash escapes.
    """
    return json.dumps(value, ensure_ascii=False)[1:-1]


def template_values(spec: PackageSpec, year: int | None = None) -> dict[str, str]:
    return {
        "name": spec.name,
        "module": spec.module_name,
        "version": spec.version,
        "author": spec.author or "unknown",
        "description": spec.description or f"{spec.name} deployment package",
        "year": str(year or datetime.now(UTC).year),
    }


def render_package(spec: PackageSpec, year: int | None = None) -> list[GeneratedFile]:
    """Render every template for ``spec``."""
    values = template_values(spec, year=year)
    escaped = {key: quote_value(value) for key, value in values.items()}
    return [
        GeneratedFile(
            path=render_text(path, values),
            content=render_text(body, escaped if quoted else values),
            reason=reason,
        )
        for path, body, reason, quoted in _FILES
    ]


def write_package(
    files: list[GeneratedFile],
    dest: Path,
    force: bool = False,
) -> ScaffoldResult:
    """Write rendered files under ``dest``.

    Existing files are kept unless ``force`` or the file allows overwrite.
    """
    result = ScaffoldResult(root=dest)
    for gen in files:
        target = dest / gen.path
        if target.exists() and not (force or gen.overwrite):
            logger.info("Skipping existing %s", target)
            result.skipped.append(gen.path)
            continue
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(gen.content, encoding="utf-8")
        logger.debug("Wrote %s (%s)", target, gen.reason)
        result.written.append(gen.path)
    return result
