"""
Scaffold models — the package being generated and the files it yields.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, field_validator


class PackageSpec(BaseModel):
    """Inputs for a new deployment package."""

    name: str
    version: str = "0.1.0"
    author: str = ""
    description: str = ""

    @field_validator("name")
    @classmethod
    def _valid_name(cls, v: str) -> str:
        if not re.fullmatch(r"[A-Za-z][A-Za-z0-9_-]*", v):
            raise ValueError(
                "package name must start with a letter and contain only "
                "letters, digits, '-' or '_'"
            )
        return v

    @property
    def module_name(self) -> str:
        """Importable module name derived from the package name."""
        return self.name.lower().replace("-", "_")


class GeneratedFile(BaseModel):
    """A file produced by the scaffolder.

    Attributes:
        path:      Relative path from the package root.
        content:   Full file content.
        overwrite: Whether to overwrite if already exists.
        reason:    Why this file was generated.
    """

    path: str
    content: str
    overwrite: bool = False
    reason: str = ""
