"""
PrerequisiteStatus — the result of evaluating one catalog entry.

A status is built fresh on every evaluation (scan, just-in-time re-check,
verification) and never mutated afterwards. Only ``name`` links statuses
from different passes.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, model_validator


class PrerequisiteStatus(BaseModel):
    """Evaluated state of a single prerequisite."""

    model_config = ConfigDict(frozen=True)

    name: str
    label: str = ""
    is_installed: bool = False
    needs_configuration: bool = False  # present but misconfigured
    is_optional: bool = False
    action: str = ""                   # empty when nothing needs doing
    priority: int = 50                 # lower runs first
    details: str = ""
    uncertain: bool = False            # probe could not decide

    @model_validator(mode="after")
    def _action_matches_state(self) -> PrerequisiteStatus:
        actionable = (
            (not self.is_installed and not self.is_optional)
            or self.needs_configuration
        )
        if actionable and not self.action:
            raise ValueError(f"{self.name}: actionable status needs an action")
        if not actionable and self.action:
            raise ValueError(f"{self.name}: action set on a status that needs none")
        return self

    @property
    def is_satisfied(self) -> bool:
        """Installed and correctly configured."""
        return self.is_installed and not self.needs_configuration

    @property
    def state(self) -> str:
        """Partition key: satisfied, configure, install or optional."""
        if self.is_installed:
            return "configure" if self.needs_configuration else "satisfied"
        return "optional" if self.is_optional else "install"
