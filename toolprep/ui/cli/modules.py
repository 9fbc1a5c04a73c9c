"""
CLI commands for bulk module updates.

Thin wrappers over ``toolprep.core.use_cases.update``.
"""

from __future__ import annotations

import json
import sys

import click

from toolprep.core.services.module_update import ModuleUpdate


@click.group()
def modules() -> None:
    """Modules — list and update configured modules."""


@modules.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_modules(ctx: click.Context, as_json: bool) -> None:
    """List modules configured in toolprep.yml."""
    from toolprep.ui.cli.runtime import build_runtime

    rt = build_runtime(ctx)
    names = rt.settings.modules

    if as_json:
        click.echo(json.dumps({"modules": names}, indent=2))
        return

    if not names:
        click.secho("⚠️  No modules configured", fg="yellow")
        return
    click.secho(f"📦 Modules ({len(names)}):", fg="cyan", bold=True)
    for name in names:
        click.echo(f"   • {name}")


@modules.command()
@click.option("--module", "-m", "selected", multiple=True, help="Update only these modules.")
@click.option("--workers", "-w", type=click.IntRange(1, 32), default=None, help="Parallel updates (default: config).")
@click.option("--timeout", type=click.IntRange(1), default=None, help="Per-module timeout in seconds.")
@click.option("--mock", is_flag=True, help="Use mock adapter (no real execution).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def update(
    ctx: click.Context,
    selected: tuple[str, ...],
    workers: int | None,
    timeout: int | None,
    mock: bool,
    as_json: bool,
) -> None:
    """Update modules in parallel.

    Examples:

        toolprep modules update

        toolprep modules update -m requests -m rich --workers 2
    """
    from toolprep.core.use_cases.update import run_update
    from toolprep.ui.cli.runtime import build_runtime

    rt = build_runtime(ctx, mock=mock)

    def _on_result(outcome: ModuleUpdate) -> None:
        if as_json:
            return
        if outcome.ok:
            click.secho(f"   ✓ {outcome.module}", fg="green", nl=False)
            if outcome.changed:
                click.echo(f"  {outcome.version_before or '?'} → {outcome.version_after or '?'}")
            else:
                click.echo()
        else:
            click.secho(f"   ✗ {outcome.module}", fg="red")
            for line in (outcome.receipt.error or "").split("\n")[:5]:
                click.echo(f"     │ {line}")

    if not as_json:
        mode = "[mock] " if mock else ""
        click.secho(f"\n⚡ {mode}Updating modules", fg="cyan", bold=True)

    result = run_update(
        rt.settings,
        rt.registry,
        rt.probe,
        modules=list(selected) or None,
        max_workers=workers,
        timeout=timeout,
        audit_writer=rt.audit_writer,
        on_result=_on_result,
    )

    report = result.report

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if report is None or report.failed:
            sys.exit(1)
        return

    if report is None:
        click.secho(f"❌ {result.error or 'Update produced no report'}", fg="red")
        sys.exit(1)

    color = {"ok": "green", "partial": "yellow", "failed": "red"}[report.status]
    click.secho(f"\n   Result: {report.succeeded}/{report.total} updated", fg=color, bold=True)
    click.echo()
    if report.failed:
        sys.exit(1)
