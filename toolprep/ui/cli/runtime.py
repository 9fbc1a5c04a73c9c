"""
Runtime wiring shared by CLI commands.

Loads settings and the catalog, then picks real or mock collaborators.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path

import click

from toolprep.adapters.probe import Probe, SystemProbe
from toolprep.adapters.registry import AdapterRegistry, default_registry
from toolprep.core.config.catalog_loader import load_catalog
from toolprep.core.config.loader import ConfigError, config_root, find_config_file, load_settings
from toolprep.core.engine.catalog import Catalog
from toolprep.core.errors import CatalogError
from toolprep.core.models.settings import Settings
from toolprep.core.persistence.audit import DEFAULT_AUDIT_FILE, AuditWriter


@dataclass
class Runtime:
    settings: Settings
    catalog: Catalog
    probe: Probe
    registry: AdapterRegistry
    root: Path
    audit_writer: AuditWriter | None = None


def build_runtime(ctx: click.Context, mock: bool = False) -> Runtime:
    """Resolve config, catalog and collaborators; exit 1 on bad config."""
    config_path: Path | None = ctx.obj.get("config_path")
    try:
        settings = load_settings(config_path)
        catalog = load_catalog(settings)
    except (ConfigError, CatalogError) as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    root = config_root(config_path or find_config_file())

    if mock:
        from toolprep.adapters.mock import MockAdapter, MockProbe, remediation_simulator

        probe: Probe = MockProbe()
        registry = AdapterRegistry(working_dir=str(root))
        registry.register(MockAdapter(on_execute=remediation_simulator(catalog, probe)))
    else:
        probe = SystemProbe()
        registry = default_registry(working_dir=str(root))

    writer = None
    if settings.audit:
        writer = AuditWriter(path=root / settings.state_dir / DEFAULT_AUDIT_FILE)

    return Runtime(
        settings=settings,
        catalog=catalog,
        probe=probe,
        registry=registry,
        root=root,
        audit_writer=writer,
    )


def parse_params(pairs: tuple[str, ...]) -> dict[str, str]:
    """Turn ``KEY=VALUE`` options into a dict."""
    params: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {pair!r}", param_hint="--param")
        params[key.strip()] = value
    return params
