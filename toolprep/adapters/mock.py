"""
Mock adapter — test double for remediation and update actions.

By default every action succeeds. Individual action IDs can be made to
fail, and an ``on_execute`` hook lets tests simulate the side effect a
real command would have had. ``MockProbe`` is the matching in-memory
stand-in for the system probe; ``remediation_simulator`` connects the two.
"""

from __future__ import annotations

import threading
from collections.abc import Callable

from toolprep.adapters.base import Adapter, ExecutionContext
from toolprep.adapters.probe import Probe
from toolprep.core.engine.catalog import Catalog
from toolprep.core.errors import EvaluationUncertain
from toolprep.core.models.action import Receipt


class MockAdapter(Adapter):
    """Universal mock adapter for testing."""

    def __init__(
        self,
        adapter_name: str = "shell",
        default_output: str = "[mock] executed",
        on_execute: Callable[[ExecutionContext], None] | None = None,
    ):
        self._name = adapter_name
        self._default_output = default_output
        self._on_execute = on_execute
        self._failures: dict[str, str] = {}
        self._call_log: list[ExecutionContext] = []
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[ExecutionContext]:
        """All execution contexts this mock has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    @property
    def executed_targets(self) -> list[str | None]:
        """Action targets in the order they were executed."""
        return [c.action.target for c in self._call_log]

    def set_failure(self, action_id: str, error: str = "Mock failure") -> None:
        """Configure a specific action to fail."""
        self._failures[action_id] = error

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        with self._lock:
            self._call_log.append(context)

        action_id = context.action.id
        if action_id in self._failures:
            return Receipt.failure(
                adapter=self._name,
                action_id=action_id,
                error=self._failures[action_id],
            )

        if self._on_execute is not None:
            self._on_execute(context)

        return Receipt.success(
            adapter=self._name,
            action_id=action_id,
            output=self._default_output,
            metadata={"mock": True},
        )


class MockProbe(Probe):
    """In-memory probe. Tests mutate it to simulate system changes.

    Query outputs are keyed by the argv joined with spaces.
    """

    def __init__(self, elevated: bool = True):
        self.elevated = elevated
        self.tools: dict[str, str] = {}
        self.outputs: dict[str, str] = {}
        self.paths: set[str] = set()
        self.broken: set[str] = set()
        self.queries: list[str] = []

    # ── Simulation helpers ───────────────────────────────────────

    def install(self, tool: str, version: str | None = None) -> None:
        self.tools[tool] = f"/usr/bin/{tool}"
        if version is not None:
            self.outputs[f"{tool} --version"] = f"{tool} version {version}"

    def uninstall(self, tool: str) -> None:
        self.tools.pop(tool, None)
        self.outputs.pop(f"{tool} --version", None)

    def set_output(self, argv: list[str] | str, value: str | None) -> None:
        key = argv if isinstance(argv, str) else " ".join(argv)
        if value is None:
            self.outputs.pop(key, None)
        else:
            self.outputs[key] = value

    def break_query(self, argv: list[str] | str) -> None:
        """Make a query raise EvaluationUncertain."""
        self.broken.add(argv if isinstance(argv, str) else " ".join(argv))

    # ── Probe interface ──────────────────────────────────────────

    def is_elevated(self) -> bool:
        return self.elevated

    def which(self, command: str) -> str | None:
        return self.tools.get(command)

    def query(self, argv: list[str]) -> str | None:
        key = " ".join(argv)
        self.queries.append(key)
        if key in self.broken:
            raise EvaluationUncertain(f"'{key}' could not be run")
        return self.outputs.get(key)

    def path_exists(self, path: str) -> bool:
        return path in self.paths


def remediation_simulator(catalog: Catalog, probe: MockProbe) -> Callable[[ExecutionContext], None]:
    """``on_execute`` hook that applies a remediation to a MockProbe.

    A successful mock install makes the matching check pass on the next
    evaluation, so mock runs and tests see the same convergence a real
    run would.
    """

    def _apply(context: ExecutionContext) -> None:
        target = context.action.target
        if target is None or target not in catalog:
            return
        spec = catalog.get(target).spec
        if spec.kind == "command":
            probe.install(spec.command or spec.name)
            if spec.version_command:
                probe.set_output(spec.version_command, spec.min_version or "1.0.0")
        elif spec.kind == "config":
            if spec.tool:
                probe.install(spec.tool)
            probe.set_output(spec.query, spec.expect or f"set-by-{spec.name}")
        elif spec.kind == "path" and spec.path:
            probe.paths.add(spec.path)

    return _apply
