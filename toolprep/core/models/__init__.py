"""
Domain models — Pydantic types for toolprep.

    from toolprep.core.models import Action, Receipt, PrerequisiteStatus, Settings
"""

from toolprep.core.models.action import Action, Receipt
from toolprep.core.models.prerequisite import PrerequisiteStatus
from toolprep.core.models.settings import CheckSpec, Settings
from toolprep.core.models.template import GeneratedFile, PackageSpec

__all__ = [
    "Action",
    "CheckSpec",
    "GeneratedFile",
    "PackageSpec",
    "PrerequisiteStatus",
    "Receipt",
    "Settings",
]
