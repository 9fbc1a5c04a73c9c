"""
Verifier — rescan after remediation and tally the result.

A report only: nothing is retried or remediated here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Literal

from toolprep.adapters.probe import Probe
from toolprep.core.engine.catalog import Catalog
from toolprep.core.engine.evaluator import scan
from toolprep.core.models.prerequisite import PrerequisiteStatus

logger = logging.getLogger(__name__)

Outcome = Literal["verified", "needs-configuration", "failed", "optional"]

_OUTCOMES: dict[str, Outcome] = {
    "satisfied": "verified",
    "configure": "needs-configuration",
    "install": "failed",
    "optional": "optional",
}


@dataclass
class VerifiedItem:
    status: PrerequisiteStatus
    outcome: Outcome
    counted: bool = True

    @property
    def name(self) -> str:
        return self.status.name

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "outcome": self.outcome,
            "counted": self.counted,
            "details": self.status.details,
        }


@dataclass
class VerificationReport:
    """Final tally across the catalog."""

    items: list[VerifiedItem] = field(default_factory=list)

    @property
    def eligible(self) -> int:
        """Counted items, minus optional ones that stay absent."""
        return sum(1 for i in self.items if i.counted and i.outcome != "optional")

    @property
    def satisfied(self) -> int:
        return sum(1 for i in self.items if i.counted and i.outcome == "verified")

    @property
    def all_ok(self) -> bool:
        return self.satisfied == self.eligible

    def outcome_of(self, name: str) -> Outcome | None:
        for item in self.items:
            if item.name == name:
                return item.outcome
        return None

    def to_dict(self) -> dict:
        return {
            "satisfied": self.satisfied,
            "eligible": self.eligible,
            "all_ok": self.all_ok,
            "items": [i.to_dict() for i in self.items],
        }


def verify(catalog: Catalog, probe: Probe) -> VerificationReport:
    """Rescan the full catalog and classify every item."""
    report = VerificationReport()
    for status in scan(catalog, probe):
        report.items.append(
            VerifiedItem(
                status=status,
                outcome=_OUTCOMES[status.state],
                counted=catalog.get(status.name).tally,
            )
        )
    logger.info("Verification: %d/%d satisfied", report.satisfied, report.eligible)
    return report
