"""
CLI command for the deployment-package scaffolder.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click
from pydantic import ValidationError


@click.command()
@click.argument("name")
@click.option("--dest", "-d", type=click.Path(file_okay=False), default=None, help="Target directory (default: ./NAME).")
@click.option("--version", "pkg_version", default="0.1.0", show_default=True, help="Initial version.")
@click.option("--author", default="", help="Author name.")
@click.option("--description", default="", help="One-line description.")
@click.option("--force", is_flag=True, help="Overwrite existing files.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def scaffold(
    name: str,
    dest: str | None,
    pkg_version: str,
    author: str,
    description: str,
    force: bool,
    as_json: bool,
) -> None:
    """Create a new deployment package from templates."""
    from toolprep.core.errors import ScaffoldError
    from toolprep.core.models.template import PackageSpec
    from toolprep.core.services.scaffold import render_package, write_package

    try:
        spec = PackageSpec(
            name=name,
            version=pkg_version,
            author=author,
            description=description,
        )
        files = render_package(spec)
    except (ValidationError, ScaffoldError) as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    target = Path(dest) if dest else Path.cwd() / name
    result = write_package(files, target, force=force)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    click.secho(f"\n📦 {spec.name} → {target}", fg="cyan", bold=True)
    for path in result.written:
        click.secho(f"   ✓ {path}", fg="green")
    for path in result.skipped:
        click.secho(f"   ⊘ {path} (exists, use --force)", fg="yellow")
    click.echo()
