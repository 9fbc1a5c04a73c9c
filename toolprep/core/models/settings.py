"""
Settings model — toolprep.yml validated into typed objects.

The file is optional; every field has a working default and the default
prerequisite catalog ships as package data.
"""

from __future__ import annotations

import re
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CheckSpec(BaseModel):
    """Declarative definition of one catalog entry.

    ``kind`` selects the handler class; the remaining fields are read by
    the handler that needs them and ignored by the others.
    """

    model_config = ConfigDict(extra="forbid")

    name: str
    kind: Literal["privilege", "command", "config", "path"]
    label: str = ""
    priority: int = 50
    optional: bool = False
    optional_unless_installed: str | None = None
    tally: bool = True
    params: list[str] = Field(default_factory=list)

    # ── command ──────────────────────────────────────────────────
    command: str | None = None           # executable looked up on PATH
    version_command: list[str] = Field(default_factory=list)
    version_pattern: str = r"(\d+\.\d+(?:\.\d+)?)"
    min_version: str | None = None
    install: str = ""                    # shell command, may use {install}

    # ── config ───────────────────────────────────────────────────
    tool: str | None = None              # executable that owns the setting
    query: list[str] = Field(default_factory=list)
    expect: str | None = None            # None = any non-empty value
    apply: str = ""                      # shell command, may use {param}

    # ── path ─────────────────────────────────────────────────────
    path: str | None = None

    @field_validator("version_pattern")
    @classmethod
    def _pattern_captures_version(cls, v: str) -> str:
        try:
            compiled = re.compile(v)
        except re.error as e:
            raise ValueError(f"invalid version_pattern {v!r}: {e}") from e
        if compiled.groups < 1:
            raise ValueError(f"version_pattern {v!r} needs a capture group for the version")
        return v


class Settings(BaseModel):
    """Root configuration (toolprep.yml)."""

    # ── Planner ──────────────────────────────────────────────────
    require_elevation: bool = False
    package_install: str = "sudo apt-get install -y"
    params: dict[str, str] = Field(default_factory=dict)
    opt_in: list[str] = Field(default_factory=list)
    prerequisites: list[CheckSpec] | None = None   # None = bundled catalog

    # ── Module updater ───────────────────────────────────────────
    modules: list[str] = Field(default_factory=list)
    update_command: str = "python3 -m pip install --user --upgrade {module}"
    version_command: str | None = None
    max_workers: int = Field(default=3, ge=1, le=32)
    update_timeout: int = Field(default=600, ge=1)

    # ── Persistence ──────────────────────────────────────────────
    audit: bool = True
    state_dir: str = ".state"
