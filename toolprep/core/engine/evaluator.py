"""
Status evaluator — turn catalog entries into PrerequisiteStatus values.

Evaluation only reads: every observation goes through the Probe. Two
evaluations against an unchanged system produce identical statuses, but
nothing ties two calls together; the system may change in between.
"""

from __future__ import annotations

import logging

from toolprep.adapters.probe import Probe
from toolprep.core.engine.catalog import Catalog
from toolprep.core.engine.checks import Observation, PrerequisiteCheck
from toolprep.core.errors import EvaluationUncertain
from toolprep.core.models.prerequisite import PrerequisiteStatus

logger = logging.getLogger(__name__)


def evaluate(catalog: Catalog, name: str, probe: Probe) -> PrerequisiteStatus:
    """Evaluate a single catalog entry.

    Raises:
        NotFound: ``name`` is not in the catalog.
    """
    return _evaluate(catalog, catalog.get(name), probe, {})


def scan(catalog: Catalog, probe: Probe) -> list[PrerequisiteStatus]:
    """Evaluate every catalog entry, in catalog order.

    A dependency's status is computed before its dependents (declaration
    order guarantees it) and reused for their optionality.
    """
    known: dict[str, PrerequisiteStatus] = {}
    for check in catalog:
        known[check.name] = _evaluate(catalog, check, probe, known)
    logger.info(
        "Scanned %d prerequisites: %d satisfied",
        len(known),
        sum(1 for s in known.values() if s.is_satisfied),
    )
    return list(known.values())


def _evaluate(
    catalog: Catalog,
    check: PrerequisiteCheck,
    probe: Probe,
    known: dict[str, PrerequisiteStatus],
) -> PrerequisiteStatus:
    uncertain = False
    try:
        obs = check.inspect(probe)
    except EvaluationUncertain as e:
        # Unknown state is treated as absent so remediation gets a chance.
        logger.warning("Cannot determine %s: %s", check.name, e)
        obs = Observation(installed=False, details=f"uncertain: {e}")
        uncertain = True

    is_optional = check.optional
    dep = check.optional_unless_installed
    if dep is not None:
        dep_status = known.get(dep)
        if dep_status is None:
            dep_status = _evaluate(catalog, catalog.get(dep), probe, known)
        is_optional = not dep_status.is_installed

    if not obs.installed and not is_optional:
        action = check.install_action
    elif obs.needs_configuration:
        action = check.configure_action
    else:
        action = ""

    return PrerequisiteStatus(
        name=check.name,
        label=check.label,
        is_installed=obs.installed,
        needs_configuration=obs.needs_configuration,
        is_optional=is_optional,
        action=action,
        priority=check.priority,
        details=obs.details,
        uncertain=uncertain,
    )
