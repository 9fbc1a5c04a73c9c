"""
Module updater — bulk-update independent modules in parallel.

Each module is one unit of work: build an Action, dispatch it through the
same ``AdapterRegistry.execute_action`` the remediation executor uses,
optionally read the version before and after. Units share nothing, so a
bounded thread pool runs them and results are gathered as they finish.
Completion order is not preserved and nothing depends on it.
"""

from __future__ import annotations

import concurrent.futures
import logging
import shlex
from collections.abc import Callable
from dataclasses import dataclass, field

from toolprep.adapters.probe import Probe
from toolprep.adapters.registry import AdapterRegistry
from toolprep.core.engine.executor import generate_operation_id
from toolprep.core.errors import EvaluationUncertain
from toolprep.core.models.action import Action, Receipt

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 3


@dataclass
class ModuleUpdate:
    """Outcome for one module."""

    module: str
    receipt: Receipt
    version_before: str | None = None
    version_after: str | None = None

    @property
    def ok(self) -> bool:
        return self.receipt.ok

    @property
    def changed(self) -> bool:
        return self.ok and self.version_before != self.version_after

    def to_dict(self) -> dict:
        return {
            "module": self.module,
            "status": self.receipt.status,
            "error": self.receipt.error,
            "version_before": self.version_before,
            "version_after": self.version_after,
            "duration_ms": self.receipt.duration_ms,
        }


@dataclass
class UpdateReport:
    """Unordered collection of per-module outcomes."""

    operation_id: str = ""
    results: dict[str, ModuleUpdate] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results.values() if r.ok)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results.values() if r.receipt.failed)

    @property
    def status(self) -> str:
        if self.failed == 0:
            return "ok"
        if self.succeeded > 0:
            return "partial"
        return "failed"

    def to_dict(self) -> dict:
        return {
            "operation_id": self.operation_id,
            "status": self.status,
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "modules": [self.results[name].to_dict() for name in sorted(self.results)],
        }


def build_update_action(
    module: str,
    command: str,
    operation_id: str,
    timeout: int | None = None,
) -> Action:
    """Action that updates one module (``{module}`` is shell-quoted)."""
    params: dict = {"command": command.replace("{module}", shlex.quote(module))}
    if timeout is not None:
        params["timeout"] = timeout
    return Action(
        id=f"{operation_id}:{module}:update",
        name=f"Update {module}",
        adapter="shell",
        target=module,
        params=params,
    )


def read_version(probe: Probe | None, version_command: str | None, module: str) -> str | None:
    """Installed version of a module, or None when unknown."""
    if probe is None or not version_command:
        return None
    argv = shlex.split(version_command.replace("{module}", module))
    try:
        output = probe.query(argv)
    except EvaluationUncertain as e:
        logger.debug("Version of %s unknown: %s", module, e)
        return None
    return output.splitlines()[0].strip() if output else None


def update_module(
    module: str,
    registry: AdapterRegistry,
    command: str,
    operation_id: str,
    *,
    timeout: int | None = None,
    version_command: str | None = None,
    probe: Probe | None = None,
) -> ModuleUpdate:
    """Update a single module. Safe to call from any thread."""
    before = read_version(probe, version_command, module)
    action = build_update_action(module, command, operation_id, timeout=timeout)
    receipt = registry.execute_action(action)
    after = read_version(probe, version_command, module) if receipt.ok else before
    return ModuleUpdate(
        module=module,
        receipt=receipt,
        version_before=before,
        version_after=after,
    )


def update_modules(
    modules: list[str],
    registry: AdapterRegistry,
    command: str,
    *,
    max_workers: int = DEFAULT_MAX_WORKERS,
    timeout: int | None = None,
    version_command: str | None = None,
    probe: Probe | None = None,
    operation_id: str | None = None,
    on_result: Callable[[ModuleUpdate], None] | None = None,
) -> UpdateReport:
    """Update every module with at most ``max_workers`` running at once.

    Waits for every unit (or its timeout) before returning. A failing
    module never stops the others.

    Args:
        modules: Module names; duplicates are updated once.
        registry: Dispatches the update actions.
        command: Shell command template containing ``{module}``.
        max_workers: Concurrency bound (at least 1).
        timeout: Per-module command timeout in seconds.
        version_command: Optional template that prints a module's version.
        probe: Runs the version command.
        operation_id: Prefix for action IDs (generated when omitted).
        on_result: Called in the collecting thread as each module finishes.
    """
    report = UpdateReport(operation_id=operation_id or generate_operation_id())
    unique = list(dict.fromkeys(modules))
    if not unique:
        return report

    workers = max(1, min(max_workers, len(unique)))
    logger.info("Updating %d modules with %d workers", len(unique), workers)

    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as pool:
        futures = {
            pool.submit(
                update_module,
                name,
                registry,
                command,
                report.operation_id,
                timeout=timeout,
                version_command=version_command,
                probe=probe,
            ): name
            for name in unique
        }
        for future in concurrent.futures.as_completed(futures):
            name = futures[future]
            try:
                outcome = future.result()
            except Exception as e:
                logger.error("Update of %s raised: %s", name, e)
                outcome = ModuleUpdate(
                    module=name,
                    receipt=Receipt.failure(
                        adapter="shell",
                        action_id=f"{report.operation_id}:{name}:update",
                        error=f"Unexpected error: {e}",
                    ),
                )
            report.results[name] = outcome
            marker = "✓" if outcome.ok else "✗"
            logger.info("%s %s → %s", marker, name, outcome.receipt.status)
            if on_result:
                on_result(outcome)

    return report
