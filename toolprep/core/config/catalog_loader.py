"""
Catalog loader — builds the Catalog from CheckSpecs.

Specs come from ``prerequisites:`` in toolprep.yml when present,
otherwise from the bundled ``core/data/prerequisites.yml``.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from toolprep.core.config.loader import ConfigError
from toolprep.core.data import DATA_DIR
from toolprep.core.engine.catalog import Catalog
from toolprep.core.engine.checks import build_check
from toolprep.core.models.settings import CheckSpec, Settings

logger = logging.getLogger(__name__)

DEFAULT_CATALOG = DATA_DIR / "prerequisites.yml"


def load_check_specs(path: Path) -> list[CheckSpec]:
    """Read a ``prerequisites:`` list from a YAML file.

    Raises:
        ConfigError: The file is unreadable or a spec is invalid.
    """
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot load catalog {path}: {e}") from e

    entries = data.get("prerequisites") if isinstance(data, dict) else None
    if not isinstance(entries, list):
        raise ConfigError(f"{path}: expected a 'prerequisites' list")

    try:
        return [CheckSpec.model_validate(entry) for entry in entries]
    except Exception as e:
        raise ConfigError(f"{path}: invalid prerequisite: {e}") from e


def build_catalog(specs: list[CheckSpec], install_prefix: str = "") -> Catalog:
    """Instantiate handlers and assemble the catalog.

    Raises:
        CatalogError: Duplicate names or forward dependency references.
    """
    return Catalog(build_check(spec, install_prefix=install_prefix) for spec in specs)


def load_catalog(settings: Settings) -> Catalog:
    """Catalog for the given settings."""
    if settings.prerequisites is not None:
        specs = settings.prerequisites
        logger.debug("Using %d prerequisites from settings", len(specs))
    else:
        specs = load_check_specs(DEFAULT_CATALOG)
        logger.debug("Using bundled catalog (%d prerequisites)", len(specs))
    return build_catalog(specs, install_prefix=settings.package_install)
