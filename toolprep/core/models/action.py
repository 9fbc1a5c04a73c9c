"""
Action and Receipt models — the execution contract.

Actions describe a remediation or update command. Receipts describe what
happened when an adapter ran it. Adapters hand back Receipts, never
exceptions, so the planner and the module updater share one dispatch path.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class Action(BaseModel):
    """A requested side effect, dispatched through the adapter registry."""

    id: str                         # unique action identifier
    name: str = ""                  # human-readable description
    adapter: str = "shell"          # which adapter handles this
    params: dict[str, Any] = Field(default_factory=dict)
    target: str | None = None       # prerequisite or module name


class Receipt(BaseModel):
    """Result of an adapter execution.

    The adapter never raises; failures are captured here with
    ``status="failed"`` and an ``error`` message.
    """

    adapter: str
    action_id: str
    status: Literal["ok", "failed"] = "ok"

    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    output: str = ""
    error: str | None = None

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @classmethod
    def success(
        cls,
        adapter: str,
        action_id: str,
        output: str = "",
        **kwargs: Any,
    ) -> Receipt:
        """Create a success receipt."""
        return cls(adapter=adapter, action_id=action_id, status="ok", output=output, **kwargs)

    @classmethod
    def failure(
        cls,
        adapter: str,
        action_id: str,
        error: str,
        **kwargs: Any,
    ) -> Receipt:
        """Create a failure receipt."""
        return cls(adapter=adapter, action_id=action_id, status="failed", error=error, **kwargs)
