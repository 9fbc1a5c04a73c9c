"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from toolprep.adapters.mock import MockAdapter, MockProbe, remediation_simulator
from toolprep.adapters.registry import AdapterRegistry
from toolprep.core.config.catalog_loader import build_catalog
from toolprep.core.engine.catalog import Catalog
from toolprep.core.models.settings import CheckSpec


def abc_specs() -> list[CheckSpec]:
    """Three-item catalog: a command, a config value and an optional path."""
    return [
        CheckSpec(
            name="A",
            kind="command",
            priority=1,
            command="tool-a",
            install="install tool-a",
        ),
        CheckSpec(
            name="B",
            kind="config",
            priority=2,
            tool="tool-b",
            query=["tool-b", "get"],
            expect="good",
            apply="tool-b set good",
        ),
        CheckSpec(
            name="C",
            kind="path",
            priority=5,
            optional=True,
            path="/opt/c",
            install="install c",
        ),
    ]


@pytest.fixture
def abc_catalog() -> Catalog:
    return build_catalog(abc_specs())


@pytest.fixture
def abc_probe() -> MockProbe:
    """A missing, B installed but misconfigured, C missing."""
    probe = MockProbe()
    probe.install("tool-b")
    probe.set_output(["tool-b", "get"], "bad")
    return probe


@pytest.fixture
def simulated(abc_catalog: Catalog, abc_probe: MockProbe) -> tuple[AdapterRegistry, MockAdapter]:
    """Registry whose mock adapter applies remediations to ``abc_probe``."""
    mock = MockAdapter(on_execute=remediation_simulator(abc_catalog, abc_probe))
    registry = AdapterRegistry()
    registry.register(mock)
    return registry, mock


@pytest.fixture
def tmp_state_dir(tmp_path: Path) -> Path:
    state_dir = tmp_path / "state"
    state_dir.mkdir()
    return state_dir
