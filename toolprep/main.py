"""
toolprep — CLI entrypoint.

Usage:
    toolprep --help
    toolprep scan
    toolprep run --yes
    toolprep modules update
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from toolprep import __version__
from toolprep.core.observability.logging_config import resolve_level, setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="toolprep")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to toolprep.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """toolprep — prepare a workstation and keep its modules current."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        quiet_third_party=not debug,
    )


@cli.command()
@click.option("--yes", "-y", "assume_yes", is_flag=True, help="Apply the plan without asking.")
@click.option("--opt-in", "opt_in", multiple=True, help="Also install this optional prerequisite.")
@click.option("--param", "-p", "param_pairs", multiple=True, help="Remediation parameter KEY=VALUE.")
@click.option("--dry-run", is_flag=True, help="Plan but don't execute.")
@click.option("--mock", is_flag=True, help="Use mock probe and adapter (no real execution).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def run(
    ctx: click.Context,
    assume_yes: bool,
    opt_in: tuple[str, ...],
    param_pairs: tuple[str, ...],
    dry_run: bool,
    mock: bool,
    as_json: bool,
) -> None:
    """Scan prerequisites, apply the plan, verify.

    Examples:

        toolprep run

        toolprep run --yes --opt-in docker

        toolprep run -p git_user_name="Ada Lovelace" -p git_user_email=ada@example.com
    """
    from toolprep.core.errors import NotFound
    from toolprep.core.use_cases.prepare import ExitCode, prepare
    from toolprep.ui.cli.operator import ClickOperator
    from toolprep.ui.cli.runtime import build_runtime, parse_params

    rt = build_runtime(ctx, mock=mock)
    params = parse_params(param_pairs)
    operator = ClickOperator(quiet=as_json)

    if not as_json:
        mode = "[dry-run] " if dry_run else "[mock] " if mock else ""
        click.secho(f"\n⚡ {mode}toolprep run", fg="cyan", bold=True)

    try:
        result = prepare(
            rt.settings,
            rt.catalog,
            rt.probe,
            rt.registry,
            operator,
            opt_in=opt_in,
            params=params,
            assume_yes=assume_yes,
            dry_run=dry_run,
            audit_writer=rt.audit_writer,
        )
    except NotFound as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(int(result.exit_code))

    if result.exit_code == ExitCode.PRIVILEGE:
        click.secho(f"❌ {result.error}", fg="red")
    elif result.cancelled:
        click.secho("\n⊘ Cancelled, nothing changed", fg="yellow")
    elif result.execution and result.execution.failure:
        failure = result.execution.failure
        click.echo()
        click.secho(f"❌ {failure.name} failed: {failure.action}", fg="red", bold=True)
        for line in failure.cause.split("\n")[:5]:
            click.echo(f"     │ {line}")
        click.echo("   Already applied changes stay in place; re-run to continue.")
    elif dry_run and not result.plan.plan.is_empty:
        click.secho("\n[dry-run] nothing executed", fg="yellow")

    click.echo()
    sys.exit(int(result.exit_code))


@cli.command()
@click.option("--opt-in", "opt_in", multiple=True, help="Include this optional prerequisite in the plan.")
@click.option("--mock", is_flag=True, help="Use mock probe (empty system).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def scan(ctx: click.Context, opt_in: tuple[str, ...], mock: bool, as_json: bool) -> None:
    """Show prerequisite status and the plan, without changing anything."""
    from toolprep.core.errors import NotFound
    from toolprep.core.use_cases.prepare import scan_prerequisites
    from toolprep.ui.cli.operator import echo_plan, echo_statuses
    from toolprep.ui.cli.runtime import build_runtime

    rt = build_runtime(ctx, mock=mock)
    try:
        statuses, plan = scan_prerequisites(
            rt.catalog,
            rt.probe,
            opt_in=[*rt.settings.opt_in, *opt_in],
        )
    except NotFound as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    if as_json:
        data = {"statuses": [s.model_dump(mode="json") for s in statuses]}
        data.update(plan.to_dict())
        click.echo(json.dumps(data, indent=2))
        return

    echo_statuses(statuses)
    echo_plan(plan)
    click.echo()


@cli.command()
@click.option("--mock", is_flag=True, help="Use mock probe (empty system).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def verify(ctx: click.Context, mock: bool, as_json: bool) -> None:
    """Re-check every prerequisite and report the tally."""
    from toolprep.core.engine.verifier import verify as verify_catalog
    from toolprep.ui.cli.operator import echo_verification
    from toolprep.ui.cli.runtime import build_runtime

    rt = build_runtime(ctx, mock=mock)
    report = verify_catalog(rt.catalog, rt.probe)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
    else:
        echo_verification(report)
        click.echo()

    if not report.all_ok:
        sys.exit(1)


# ── Register sub-command groups from toolprep/ui/cli/ ──────────────

from toolprep.ui.cli.modules import modules
from toolprep.ui.cli.scaffold import scaffold

cli.add_command(modules)
cli.add_command(scaffold)


if __name__ == "__main__":
    cli()
