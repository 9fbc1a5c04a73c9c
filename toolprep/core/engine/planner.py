"""
Plan builder — partition one scan and order what needs doing.

Pure transformation: no probe, no adapters.

    statuses → partition → (configure ∪ install ∪ opted-in optional)
             → stable sort by (priority, catalog position)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from toolprep.core.engine.catalog import Catalog
from toolprep.core.errors import IncompleteScan, NotFound
from toolprep.core.models.prerequisite import PrerequisiteStatus

logger = logging.getLogger(__name__)


@dataclass
class ScanPartition:
    """Every status lands in exactly one bucket."""

    satisfied: list[PrerequisiteStatus] = field(default_factory=list)
    needs_configuration: list[PrerequisiteStatus] = field(default_factory=list)
    needs_installation: list[PrerequisiteStatus] = field(default_factory=list)
    optional_unsatisfied: list[PrerequisiteStatus] = field(default_factory=list)

    @property
    def total(self) -> int:
        return (
            len(self.satisfied)
            + len(self.needs_configuration)
            + len(self.needs_installation)
            + len(self.optional_unsatisfied)
        )

    def to_dict(self) -> dict:
        return {
            "satisfied": [s.name for s in self.satisfied],
            "needs_configuration": [s.name for s in self.needs_configuration],
            "needs_installation": [s.name for s in self.needs_installation],
            "optional_unsatisfied": [s.name for s in self.optional_unsatisfied],
        }


@dataclass
class RemediationPlan:
    """Ordered statuses to remediate, lowest priority first."""

    items: list[PrerequisiteStatus] = field(default_factory=list)
    required_params: list[str] = field(default_factory=list)

    @property
    def names(self) -> list[str]:
        return [s.name for s in self.items]

    @property
    def is_empty(self) -> bool:
        return not self.items

    def __len__(self) -> int:
        return len(self.items)

    def to_dict(self) -> dict:
        return {
            "items": [s.model_dump(mode="json") for s in self.items],
            "required_params": self.required_params,
        }


@dataclass
class PlanResult:
    """Partition plus the plan derived from it."""

    partition: ScanPartition
    plan: RemediationPlan

    def to_dict(self) -> dict:
        return {"partition": self.partition.to_dict(), "plan": self.plan.to_dict()}


def partition(statuses: Iterable[PrerequisiteStatus]) -> ScanPartition:
    """Split statuses into the four mutually exclusive buckets."""
    result = ScanPartition()
    buckets = {
        "satisfied": result.satisfied,
        "configure": result.needs_configuration,
        "install": result.needs_installation,
        "optional": result.optional_unsatisfied,
    }
    for status in statuses:
        buckets[status.state].append(status)
    return result


def build_plan(
    catalog: Catalog,
    statuses: Iterable[PrerequisiteStatus],
    opt_in: Iterable[str] = (),
) -> PlanResult:
    """Build the remediation plan for one complete scan.

    Args:
        catalog: The catalog the statuses were evaluated against.
        statuses: One status per catalog entry.
        opt_in: Optional items the operator chose to install.

    Raises:
        IncompleteScan: Some catalog entries have no status.
        NotFound: A status or opt-in name is not in the catalog.
    """
    statuses = list(statuses)
    seen = set()
    for status in statuses:
        if status.name not in catalog:
            raise NotFound(status.name)
        seen.add(status.name)

    missing = [name for name in catalog.names if name not in seen]
    if missing:
        raise IncompleteScan(missing)

    opted = set()
    for name in opt_in:
        if name not in catalog:
            raise NotFound(name)
        opted.add(name)

    parts = partition(statuses)

    chosen = list(parts.needs_configuration) + list(parts.needs_installation)
    for status in parts.optional_unsatisfied:
        if status.name in opted:
            chosen.append(status)
    for name in opted:
        if not any(s.name == name for s in parts.optional_unsatisfied):
            logger.info("Opt-in for %s ignored: not an unsatisfied optional item", name)

    chosen.sort(key=lambda s: (s.priority, catalog.position(s.name)))

    required: list[str] = []
    for status in chosen:
        for param in catalog.get(status.name).params:
            if param not in required:
                required.append(param)

    plan = RemediationPlan(items=chosen, required_params=required)
    logger.info("Plan: %s", ", ".join(plan.names) or "(empty)")
    return PlanResult(partition=parts, plan=plan)
