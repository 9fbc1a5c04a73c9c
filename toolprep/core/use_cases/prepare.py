"""
Prepare use case — the full planner run.

    privilege gate → scan → plan → operator confirms → collect params
                  → execute (fail-fast) → verify → audit

All operator input is gathered before the executor starts; the executor
never stops to ask.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import IntEnum

from toolprep.adapters.probe import Probe
from toolprep.adapters.registry import AdapterRegistry
from toolprep.core.engine.catalog import Catalog
from toolprep.core.engine.evaluator import scan
from toolprep.core.engine.executor import ExecutionResult, execute_plan, generate_operation_id
from toolprep.core.engine.planner import PlanResult, RemediationPlan, build_plan
from toolprep.core.engine.verifier import VerificationReport, verify
from toolprep.core.errors import PrivilegeError
from toolprep.core.models.prerequisite import PrerequisiteStatus
from toolprep.core.models.settings import Settings
from toolprep.core.persistence.audit import AuditEntry, AuditWriter

logger = logging.getLogger(__name__)


class ExitCode(IntEnum):
    OK = 0
    FAILED = 1
    PRIVILEGE = 2
    CANCELLED = 3


class Operator(ABC):
    """Everything the run needs from a human (or a script standing in)."""

    @abstractmethod
    def present_plan(self, statuses: list[PrerequisiteStatus], plan: PlanResult) -> None:
        """Show the scan and the plan."""

    @abstractmethod
    def confirm(self, plan: RemediationPlan) -> bool:
        """Yes/no: go ahead with the plan."""

    @abstractmethod
    def collect_params(self, names: list[str]) -> dict[str, str]:
        """Ask for parameter values the plan needs and config did not supply."""

    def on_progress(self, name: str, event: str) -> None:
        """Executor progress (started, skipped, done, failed)."""

    def present_verification(self, report: VerificationReport) -> None:
        """Show the final tally."""


@dataclass
class PrepareResult:
    """Everything a prepare run produced."""

    operation_id: str = ""
    statuses: list[PrerequisiteStatus] = field(default_factory=list)
    plan: PlanResult | None = None
    execution: ExecutionResult | None = None
    verification: VerificationReport | None = None
    exit_code: ExitCode = ExitCode.OK
    error: str | None = None
    cancelled: bool = False
    dry_run: bool = False

    @property
    def status(self) -> str:
        if self.exit_code == ExitCode.PRIVILEGE:
            return "privilege"
        if self.cancelled:
            return "cancelled"
        if self.execution is not None:
            return self.execution.state.value
        if self.dry_run and self.plan and not self.plan.plan.is_empty:
            return "planned"
        return "satisfied" if self.exit_code == ExitCode.OK else "failed"

    def to_dict(self) -> dict:
        result: dict = {
            "operation_id": self.operation_id,
            "status": self.status,
            "exit_code": int(self.exit_code),
        }
        if self.error:
            result["error"] = self.error
        if self.statuses:
            result["statuses"] = [s.model_dump(mode="json") for s in self.statuses]
        if self.plan:
            result.update(self.plan.to_dict())
        if self.execution:
            result["execution"] = self.execution.to_dict()
        if self.verification:
            result["verification"] = self.verification.to_dict()
        return result


def check_privilege(settings: Settings, probe: Probe) -> None:
    """Raise PrivilegeError when elevation is required and absent."""
    if settings.require_elevation and not probe.is_elevated():
        raise PrivilegeError("Elevated privileges are required; re-run as administrator/root")


def scan_prerequisites(
    catalog: Catalog,
    probe: Probe,
    opt_in: Iterable[str] = (),
) -> tuple[list[PrerequisiteStatus], PlanResult]:
    """Scan and plan without touching anything."""
    statuses = scan(catalog, probe)
    return statuses, build_plan(catalog, statuses, opt_in=opt_in)


def prepare(
    settings: Settings,
    catalog: Catalog,
    probe: Probe,
    registry: AdapterRegistry,
    operator: Operator,
    *,
    opt_in: Iterable[str] = (),
    params: dict[str, str] | None = None,
    assume_yes: bool = False,
    dry_run: bool = False,
    audit_writer: AuditWriter | None = None,
) -> PrepareResult:
    """Run the full scan → plan → execute → verify cycle.

    Args:
        settings: Loaded configuration.
        catalog: Prerequisite catalog.
        probe: Read-only system queries.
        registry: Dispatches remediation actions.
        operator: Confirmation, parameter input and progress display.
        opt_in: Optional items to install (merged with ``settings.opt_in``).
        params: Parameter values overriding ``settings.params``.
        assume_yes: Skip the confirmation question.
        dry_run: Stop after planning and parameter collection.
        audit_writer: Ledger to append the run to.
    """
    result = PrepareResult(operation_id=generate_operation_id(), dry_run=dry_run)

    try:
        check_privilege(settings, probe)
    except PrivilegeError as e:
        logger.error("%s", e)
        result.error = str(e)
        result.exit_code = ExitCode.PRIVILEGE
        _audit(audit_writer, result)
        return result

    chosen = list(dict.fromkeys([*settings.opt_in, *opt_in]))
    result.statuses, result.plan = scan_prerequisites(catalog, probe, opt_in=chosen)
    operator.present_plan(result.statuses, result.plan)

    plan = result.plan.plan
    if plan.is_empty:
        logger.info("Nothing to do: all required prerequisites satisfied")
        result.verification = verify(catalog, probe)
        operator.present_verification(result.verification)
        _audit(audit_writer, result)
        return result

    if not assume_yes and not operator.confirm(plan):
        logger.info("Plan declined by operator")
        result.cancelled = True
        result.exit_code = ExitCode.CANCELLED
        _audit(audit_writer, result)
        return result

    values = {**settings.params, **(params or {})}
    missing = [name for name in plan.required_params if not values.get(name)]
    if missing:
        values.update(operator.collect_params(missing))

    if dry_run:
        logger.info("Dry run: %d remediations planned, none executed", len(plan))
        return result

    result.execution = execute_plan(
        plan,
        catalog,
        probe,
        registry,
        values,
        operation_id=result.operation_id,
        on_progress=operator.on_progress,
    )
    if not result.execution.ok:
        result.exit_code = ExitCode.FAILED
        failure = result.execution.failure
        result.error = str(failure) if failure else "remediation failed"

    result.verification = verify(catalog, probe)
    operator.present_verification(result.verification)
    _audit(audit_writer, result)
    return result


def _audit(writer: AuditWriter | None, result: PrepareResult) -> None:
    if writer is None:
        return
    execution = result.execution
    writer.write(
        AuditEntry(
            operation_id=result.operation_id,
            operation_type="prepare",
            status=result.status,
            items=result.plan.plan.names if result.plan else [],
            applied=execution.applied if execution else [],
            failed=[execution.failure.name] if execution and execution.failure else [],
            errors=[result.error] if result.error else [],
            context={
                "satisfied": result.verification.satisfied if result.verification else None,
                "eligible": result.verification.eligible if result.verification else None,
            },
        )
    )
