"""
Update use case — bulk module update with an audit entry.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from toolprep.adapters.probe import Probe
from toolprep.adapters.registry import AdapterRegistry
from toolprep.core.models.settings import Settings
from toolprep.core.persistence.audit import AuditEntry, AuditWriter
from toolprep.core.services.module_update import ModuleUpdate, UpdateReport, update_modules

logger = logging.getLogger(__name__)


@dataclass
class UpdateResult:
    report: UpdateReport | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        return self.report.to_dict() if self.report else {}


def run_update(
    settings: Settings,
    registry: AdapterRegistry,
    probe: Probe | None = None,
    *,
    modules: list[str] | None = None,
    max_workers: int | None = None,
    timeout: int | None = None,
    audit_writer: AuditWriter | None = None,
    on_result: Callable[[ModuleUpdate], None] | None = None,
) -> UpdateResult:
    """Update the selected (or all configured) modules."""
    targets = list(modules) if modules else list(settings.modules)
    if not targets:
        return UpdateResult(error="No modules to update: list them under 'modules' in toolprep.yml")

    report = update_modules(
        targets,
        registry,
        settings.update_command,
        max_workers=max_workers or settings.max_workers,
        timeout=timeout or settings.update_timeout,
        version_command=settings.version_command,
        probe=probe,
        on_result=on_result,
    )

    if audit_writer is not None:
        audit_writer.write(
            AuditEntry(
                operation_id=report.operation_id,
                operation_type="update",
                status=report.status,
                items=targets,
                applied=[n for n, r in report.results.items() if r.ok],
                failed=[n for n, r in report.results.items() if r.receipt.failed],
                errors=[
                    f"{n}: {r.receipt.error}"
                    for n, r in report.results.items()
                    if r.receipt.failed
                ],
            )
        )
    return UpdateResult(report=report)
