"""
Tests for domain models — status invariants, receipts, settings.
"""

import pytest
from pydantic import ValidationError

from toolprep.core.models import (
    Action,
    CheckSpec,
    PackageSpec,
    PrerequisiteStatus,
    Receipt,
    Settings,
)


class TestPrerequisiteStatus:
    def test_satisfied(self):
        s = PrerequisiteStatus(name="git", is_installed=True)
        assert s.is_satisfied
        assert s.state == "satisfied"
        assert s.action == ""

    def test_install_needs_action(self):
        with pytest.raises(ValidationError):
            PrerequisiteStatus(name="git", is_installed=False)

    def test_configure_needs_action(self):
        with pytest.raises(ValidationError):
            PrerequisiteStatus(name="git", is_installed=True, needs_configuration=True)

    def test_optional_missing_has_no_action(self):
        with pytest.raises(ValidationError):
            PrerequisiteStatus(name="docker", is_optional=True, action="Install docker")
        s = PrerequisiteStatus(name="docker", is_optional=True)
        assert s.state == "optional"

    def test_states(self):
        assert PrerequisiteStatus(
            name="a", is_installed=True, needs_configuration=True, action="Configure a"
        ).state == "configure"
        assert PrerequisiteStatus(name="a", action="Install a").state == "install"

    def test_frozen(self):
        s = PrerequisiteStatus(name="git", is_installed=True)
        with pytest.raises(ValidationError):
            s.is_installed = False  # type: ignore[misc]

    def test_equality_is_field_for_field(self):
        a = PrerequisiteStatus(name="git", is_installed=True, details="2.43.0")
        b = PrerequisiteStatus(name="git", is_installed=True, details="2.43.0")
        assert a == b


class TestReceipt:
    def test_success(self):
        r = Receipt.success(adapter="shell", action_id="a1", output="done")
        assert r.ok
        assert not r.failed

    def test_failure(self):
        r = Receipt.failure(adapter="shell", action_id="a1", error="boom")
        assert r.failed
        assert r.error == "boom"

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            Receipt(adapter="shell", action_id="a1", status="skipped")

    def test_action_defaults(self):
        a = Action(id="x")
        assert a.adapter == "shell"
        assert a.params == {}


class TestSettings:
    def test_defaults(self):
        s = Settings()
        assert s.require_elevation is False
        assert s.max_workers == 3
        assert s.prerequisites is None

    def test_max_workers_bounds(self):
        with pytest.raises(ValidationError):
            Settings(max_workers=0)

    def test_check_spec_rejects_unknown_fields(self):
        with pytest.raises(ValidationError):
            CheckSpec(name="x", kind="command", bogus=True)

    def test_check_spec_rejects_unknown_kind(self):
        with pytest.raises(ValidationError):
            CheckSpec(name="x", kind="registry")


class TestPackageSpec:
    def test_module_name(self):
        assert PackageSpec(name="My-Deploy").module_name == "my_deploy"

    def test_invalid_name(self):
        with pytest.raises(ValidationError):
            PackageSpec(name="1bad name")
