"""
Remediation executor — run a plan in order, stop at the first failure.

    pending → running(item) → running(next) … → completed
                            ↘ failed(item) → aborted

Each item is re-evaluated just before it runs; an earlier remediation may
already have satisfied it. Nothing is rolled back after a failure. The
operator re-runs the planner, which skips what is already in place.

There is no timeout at this level: a remediation either returns or the
executor waits. The shell adapter enforces a per-command timeout only
when one is configured.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum

from toolprep.adapters.probe import Probe
from toolprep.adapters.registry import AdapterRegistry
from toolprep.core.engine.catalog import Catalog
from toolprep.core.engine.evaluator import evaluate
from toolprep.core.engine.planner import RemediationPlan
from toolprep.core.errors import RemediationFailure
from toolprep.core.models.action import Receipt

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, str], None]


class RunState(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    ABORTED = "aborted"


@dataclass
class ExecutionResult:
    """Outcome of one plan run."""

    operation_id: str = ""
    state: RunState = RunState.PENDING
    applied: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    receipts: list[Receipt] = field(default_factory=list)
    failure: RemediationFailure | None = None

    @property
    def ok(self) -> bool:
        return self.state == RunState.COMPLETED

    def to_dict(self) -> dict:
        return {
            "operation_id": self.operation_id,
            "state": self.state.value,
            "applied": self.applied,
            "skipped": self.skipped,
            "failure": self.failure.to_dict() if self.failure else None,
            "receipts": [r.model_dump(mode="json") for r in self.receipts],
        }


def execute_plan(
    plan: RemediationPlan,
    catalog: Catalog,
    probe: Probe,
    registry: AdapterRegistry,
    params: dict[str, str] | None = None,
    *,
    operation_id: str | None = None,
    timeout: int | None = None,
    on_progress: ProgressCallback | None = None,
) -> ExecutionResult:
    """Remediate every plan item in order, fail-fast.

    Args:
        plan: Ordered plan from ``build_plan``.
        catalog: Catalog the plan was built from.
        probe: Used for the just-in-time re-check.
        registry: Dispatches the remediation actions.
        params: Operator-supplied values, all collected beforehand.
        operation_id: Prefix for action IDs (generated when omitted).
        timeout: Optional per-command timeout handed to the adapter.
        on_progress: Called with (name, event); events are
            ``started``, ``skipped``, ``done``, ``failed``.

    Returns:
        ExecutionResult in state ``completed`` or ``aborted``.
    """
    params = params or {}
    result = ExecutionResult(operation_id=operation_id or generate_operation_id())

    def _emit(name: str, event: str) -> None:
        if on_progress:
            on_progress(name, event)

    for item in plan.items:
        result.state = RunState.RUNNING
        check = catalog.get(item.name)

        current = evaluate(catalog, item.name, probe)
        if current.is_satisfied:
            logger.info("⊘ %s already satisfied, skipping", item.name)
            result.skipped.append(item.name)
            _emit(item.name, "skipped")
            continue

        _emit(item.name, "started")
        action_id = f"{result.operation_id}:{item.name}"
        try:
            action = check.remediate(current, params, action_id, timeout=timeout)
        except RemediationFailure as e:
            return _abort(result, e, _emit)

        receipt = registry.execute_action(action)
        result.receipts.append(receipt)

        if receipt.failed:
            failure = RemediationFailure(
                item.name,
                action.name,
                receipt.error or "remediation failed",
            )
            return _abort(result, failure, _emit)

        logger.info("✓ %s → %s", item.name, action.name)
        result.applied.append(item.name)
        _emit(item.name, "done")

    result.state = RunState.COMPLETED
    return result


def _abort(
    result: ExecutionResult,
    failure: RemediationFailure,
    emit: Callable[[str, str], None],
) -> ExecutionResult:
    logger.error("✗ %s failed: %s", failure.name, failure.cause)
    result.failure = failure
    result.state = RunState.ABORTED
    emit(failure.name, "failed")
    return result


def generate_operation_id() -> str:
    """Generate a unique operation ID."""
    now = datetime.now(UTC).strftime("%Y%m%d-%H%M%S")
    short = uuid.uuid4().hex[:6]
    return f"op-{now}-{short}"
