"""
Catalog — the fixed, ordered set of prerequisite checks.

Order matters twice: it is the display order and the tie-breaker when
two remediations share a priority.

An entry may name another entry in ``optional_unless_installed``. The
referenced entry must be declared earlier, which keeps the dependency
graph acyclic by construction; the catalog author preserves this when
editing the YAML, and ``Catalog`` rejects a catalog that breaks it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from toolprep.core.engine.checks import PrerequisiteCheck
from toolprep.core.errors import CatalogError, NotFound

logger = logging.getLogger(__name__)


class Catalog:
    """Immutable, name-indexed collection of checks."""

    def __init__(self, checks: Iterable[PrerequisiteCheck]):
        ordered: list[PrerequisiteCheck] = []
        index: dict[str, int] = {}

        for check in checks:
            if check.name in index:
                raise CatalogError(f"Duplicate prerequisite name: {check.name!r}")
            dep = check.optional_unless_installed
            if dep is not None and dep not in index:
                raise CatalogError(
                    f"{check.name!r} depends on {dep!r}, which must be declared before it"
                )
            index[check.name] = len(ordered)
            ordered.append(check)

        self._checks = tuple(ordered)
        self._index = index
        logger.debug("Catalog built with %d checks", len(self._checks))

    def __iter__(self) -> Iterator[PrerequisiteCheck]:
        return iter(self._checks)

    def __len__(self) -> int:
        return len(self._checks)

    def __contains__(self, name: object) -> bool:
        return name in self._index

    @property
    def names(self) -> list[str]:
        return [c.name for c in self._checks]

    def get(self, name: str) -> PrerequisiteCheck:
        """Look up a check by name.

        Raises:
            NotFound: The name is not in the catalog.
        """
        try:
            return self._checks[self._index[name]]
        except KeyError:
            raise NotFound(name) from None

    def position(self, name: str) -> int:
        """Declaration index of a check (tie-breaker for equal priorities)."""
        if name not in self._index:
            raise NotFound(name)
        return self._index[name]
