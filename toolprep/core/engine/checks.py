"""
Prerequisite checks — one handler class per catalog ``kind``.

Every handler exposes the same two capabilities:

    inspect(probe)             read-only observation of the system
    remediate(status, params)  the Action that would fix it

The catalog looks handlers up by name; nothing branches on the name.
"""

from __future__ import annotations

import re
import shlex
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar

from toolprep.adapters.probe import Probe
from toolprep.core.errors import RemediationFailure
from toolprep.core.models.action import Action
from toolprep.core.models.prerequisite import PrerequisiteStatus
from toolprep.core.models.settings import CheckSpec

_PLACEHOLDER = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")
_ANY_VERSION = re.compile(r"(\d+\.\d+(?:\.\d+)?)")


@dataclass(frozen=True)
class Observation:
    """What a check saw, before optionality and actions are applied."""

    installed: bool
    needs_configuration: bool = False
    details: str = ""


def _parse_version(v: str) -> tuple[int, ...]:
    return tuple(int(x) for x in v.lstrip("v").split(".")[:3])


class PrerequisiteCheck(ABC):
    """Base handler: the fields every catalog entry carries."""

    kind: ClassVar[str] = ""

    def __init__(self, spec: CheckSpec, install_prefix: str = ""):
        self.spec = spec
        self._install_prefix = install_prefix

    @property
    def name(self) -> str:
        return self.spec.name

    @property
    def label(self) -> str:
        return self.spec.label or self.spec.name

    @property
    def priority(self) -> int:
        return self.spec.priority

    @property
    def optional(self) -> bool:
        return self.spec.optional

    @property
    def optional_unless_installed(self) -> str | None:
        return self.spec.optional_unless_installed

    @property
    def tally(self) -> bool:
        return self.spec.tally

    @property
    def params(self) -> list[str]:
        return list(self.spec.params)

    @abstractmethod
    def inspect(self, probe: Probe) -> Observation:
        """Observe the current state. Must not change anything."""

    @abstractmethod
    def command_template(self) -> str:
        """Shell command that remediates this item (placeholders unresolved)."""

    @property
    def install_action(self) -> str:
        return f"Install {self.label}"

    @property
    def configure_action(self) -> str:
        return f"Configure {self.label}"

    def render_command(self, params: dict[str, str]) -> str:
        """Fill ``{install}`` and declared parameter placeholders.

        Other brace groups are left untouched so ordinary shell syntax
        survives. Parameter values are shell-quoted.

        Raises:
            RemediationFailure: A declared parameter has no value.
        """
        template = self.command_template()
        if not template:
            raise RemediationFailure(
                self.name, self.install_action, "no remediation command defined"
            )
        declared = set(self.spec.params)

        def _sub(match: re.Match[str]) -> str:
            key = match.group(1)
            if key == "install":
                return self._install_prefix
            if key not in declared:
                return match.group(0)
            value = params.get(key, "")
            if not value:
                raise RemediationFailure(
                    self.name, self.configure_action, f"missing parameter '{key}'"
                )
            return shlex.quote(value)

        return _PLACEHOLDER.sub(_sub, template)

    def remediate(
        self,
        status: PrerequisiteStatus,
        params: dict[str, str],
        action_id: str,
        timeout: int | None = None,
    ) -> Action:
        """Build the Action that brings this item into a satisfied state.

        Raises:
            RemediationFailure: The action cannot be built.
        """
        description = status.action or (
            self.configure_action if status.needs_configuration else self.install_action
        )
        action_params: dict = {"command": self.render_command(params)}
        if timeout is not None:
            action_params["timeout"] = timeout
        return Action(
            id=action_id,
            name=description,
            adapter="shell",
            target=self.name,
            params=action_params,
        )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r} priority={self.priority}>"


class PrivilegeCheck(PrerequisiteCheck):
    """Elevated privilege. Never remediable and never tallied."""

    kind = "privilege"

    def inspect(self, probe: Probe) -> Observation:
        elevated = probe.is_elevated()
        return Observation(
            installed=elevated,
            details="elevated" if elevated else "not elevated",
        )

    def command_template(self) -> str:
        return ""

    def render_command(self, params: dict[str, str]) -> str:
        raise RemediationFailure(
            self.name, "Re-run elevated", "privilege cannot be acquired by remediation"
        )


class CommandCheck(PrerequisiteCheck):
    """An executable on PATH, optionally with a minimum version."""

    kind = "command"

    def inspect(self, probe: Probe) -> Observation:
        command = self.spec.command or self.name
        path = probe.which(command)
        if path is None:
            return Observation(installed=False, details=f"{command} not found on PATH")

        if not self.spec.version_command:
            return Observation(installed=True, details=path)

        output = probe.query(self.spec.version_command) or ""
        # Output formats drift between releases; fall back to any x.y[.z]
        match = re.search(self.spec.version_pattern, output) or _ANY_VERSION.search(output)
        version = match.group(1) if match else None

        if self.spec.min_version is None:
            return Observation(installed=True, details=f"{version or 'unknown'} at {path}")

        if version is None:
            return Observation(
                installed=False,
                details=f"cannot read version of {command}, need >= {self.spec.min_version}",
            )
        try:
            too_old = _parse_version(version) < _parse_version(self.spec.min_version)
        except ValueError:
            too_old = True
        if too_old:
            return Observation(
                installed=False,
                details=f"found {version}, need >= {self.spec.min_version}",
            )
        return Observation(installed=True, details=f"{version} at {path}")

    def command_template(self) -> str:
        return self.spec.install


class ConfigCheck(PrerequisiteCheck):
    """A setting read by a query command and written by an apply command.

    Installed means the owning tool is present; the value decides
    ``needs_configuration``.
    """

    kind = "config"

    def inspect(self, probe: Probe) -> Observation:
        tool = self.spec.tool or (self.spec.query[0] if self.spec.query else self.name)
        if probe.which(tool) is None:
            return Observation(installed=False, details=f"{tool} not found on PATH")

        value = probe.query(self.spec.query) if self.spec.query else None
        if self.spec.expect is None:
            wrong = not value
        else:
            wrong = value != self.spec.expect
        shown = value if value else "<unset>"
        return Observation(installed=True, needs_configuration=wrong, details=shown)

    @property
    def install_action(self) -> str:
        return f"Configure {self.label} (requires {self.spec.tool or 'its tool'})"

    def command_template(self) -> str:
        return self.spec.apply


class PathCheck(PrerequisiteCheck):
    """A file or directory that must exist."""

    kind = "path"

    def inspect(self, probe: Probe) -> Observation:
        path = self.spec.path or ""
        exists = bool(path) and probe.path_exists(path)
        return Observation(
            installed=exists,
            details=path if exists else f"{path or '<no path>'} missing",
        )

    def command_template(self) -> str:
        return self.spec.install


CHECK_KINDS: dict[str, type[PrerequisiteCheck]] = {
    cls.kind: cls for cls in (PrivilegeCheck, CommandCheck, ConfigCheck, PathCheck)
}


def build_check(spec: CheckSpec, install_prefix: str = "") -> PrerequisiteCheck:
    """Instantiate the handler registered for ``spec.kind``."""
    return CHECK_KINDS[spec.kind](spec, install_prefix=install_prefix)
