"""
Click operator — terminal implementation of the planner's Operator.

Display is suppressed in JSON mode; prompts always go to stderr so JSON
on stdout stays parseable.
"""

from __future__ import annotations

import click

from toolprep.core.engine.planner import PlanResult, RemediationPlan
from toolprep.core.engine.verifier import VerificationReport
from toolprep.core.models.prerequisite import PrerequisiteStatus
from toolprep.core.use_cases.prepare import Operator

_STATE_ICONS = {
    "satisfied": ("✓", "green"),
    "configure": ("⚙", "yellow"),
    "install": ("✗", "red"),
    "optional": ("○", "white"),
}

_OUTCOME_ICONS = {
    "verified": ("✓", "green"),
    "needs-configuration": ("⚙", "yellow"),
    "failed": ("✗", "red"),
    "optional": ("○", "white"),
}

_PROGRESS = {
    "started": ("→", "cyan"),
    "skipped": ("⊘", "white"),
    "done": ("✓", "green"),
    "failed": ("✗", "red"),
}


def echo_statuses(statuses: list[PrerequisiteStatus]) -> None:
    click.secho("\n🔍 Prerequisites", fg="cyan", bold=True)
    for status in statuses:
        icon, color = _STATE_ICONS[status.state]
        click.secho(f"   {icon} {status.label:<28}", fg=color, nl=False)
        click.echo(f" {status.details}")


def echo_plan(plan: PlanResult) -> None:
    parts = plan.partition
    click.echo()
    click.echo(
        f"   Satisfied: {len(parts.satisfied)} | "
        f"Configure: {len(parts.needs_configuration)} | "
        f"Install: {len(parts.needs_installation)} | "
        f"Optional: {len(parts.optional_unsatisfied)}"
    )
    if plan.plan.is_empty:
        click.secho("\n✅ Nothing to do", fg="green", bold=True)
        return
    click.secho("\n📋 Plan", fg="cyan", bold=True)
    for i, status in enumerate(plan.plan.items, start=1):
        action = status.action or f"Install {status.label} (opted in)"
        click.echo(f"   {i}. [{status.priority:>3}] {action}")
    if parts.optional_unsatisfied:
        names = ", ".join(s.name for s in parts.optional_unsatisfied)
        click.echo(f"\n   Optional, not installed: {names}")


def echo_verification(report: VerificationReport) -> None:
    click.secho("\n🔎 Verification", fg="cyan", bold=True)
    for item in report.items:
        if not item.counted:
            continue
        icon, color = _OUTCOME_ICONS[item.outcome]
        click.secho(f"   {icon} {item.status.label:<28}", fg=color, nl=False)
        click.echo(f" {item.outcome}")
    color = "green" if report.all_ok else "yellow"
    click.secho(
        f"\n   Result: {report.satisfied}/{report.eligible} satisfied",
        fg=color,
        bold=True,
    )


class ClickOperator(Operator):
    """Interactive operator on the terminal."""

    def __init__(self, quiet: bool = False):
        self._quiet = quiet

    def present_plan(self, statuses: list[PrerequisiteStatus], plan: PlanResult) -> None:
        if self._quiet:
            return
        echo_statuses(statuses)
        echo_plan(plan)

    def confirm(self, plan: RemediationPlan) -> bool:
        return click.confirm(
            f"\nApply {len(plan)} remediation(s)?",
            default=False,
            err=True,
        )

    def collect_params(self, names: list[str]) -> dict[str, str]:
        return {
            name: click.prompt(name.replace("_", " ").capitalize(), err=True)
            for name in names
        }

    def on_progress(self, name: str, event: str) -> None:
        if self._quiet:
            return
        icon, color = _PROGRESS.get(event, ("•", "white"))
        click.secho(f"   {icon} {name} ", fg=color, nl=False)
        click.echo(f"({event})")

    def present_verification(self, report: VerificationReport) -> None:
        if self._quiet:
            return
        echo_verification(report)
