"""
Error kinds for the prerequisite planner.

Contract errors (``NotFound``, ``IncompleteScan``, ``CatalogError``) are
programming mistakes and propagate.  ``RemediationFailure`` is an expected
operator-visible outcome: the executor stores it in its result instead of
raising it past the use case.
"""

from __future__ import annotations


class ToolprepError(Exception):
    """Base class for all toolprep errors."""


class PrivilegeError(ToolprepError):
    """Required elevated privilege is absent."""


class NotFound(ToolprepError):
    """A check name is not part of the catalog."""

    def __init__(self, name: str):
        super().__init__(f"Unknown prerequisite: {name!r}")
        self.name = name


class IncompleteScan(ToolprepError):
    """Plan building was given a status set that misses catalog entries."""

    def __init__(self, missing: list[str]):
        super().__init__(f"Scan is missing statuses for: {', '.join(missing)}")
        self.missing = missing


class CatalogError(ToolprepError):
    """The catalog definition is invalid (duplicate names, bad references)."""


class EvaluationUncertain(ToolprepError):
    """A probe could not determine the state of a capability."""


class RemediationFailure(ToolprepError):
    """A remediation step failed.

    Attributes:
        name:   The prerequisite whose remediation failed.
        action: Human-readable description of what was attempted.
        cause:  Underlying error text.
    """

    def __init__(self, name: str, action: str = "", cause: str = ""):
        super().__init__(f"{name}: {cause or 'remediation failed'}")
        self.name = name
        self.action = action
        self.cause = cause

    def to_dict(self) -> dict:
        return {"name": self.name, "action": self.action, "cause": self.cause}


class ScaffoldError(ToolprepError):
    """A deployment-package template could not be rendered."""
