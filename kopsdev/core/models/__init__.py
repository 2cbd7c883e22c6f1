"""
Domain models — Pydantic types for kopsdev.

All models are re-exported here for convenient access:

    from kopsdev.core.models import InstallOptions, PlatformInfo, CommandSpec, Receipt
"""

from kopsdev.core.models.command import CommandSpec, Receipt
from kopsdev.core.models.options import InstallOptions
from kopsdev.core.models.plan import InstallReport, InstallStep, StepResult
from kopsdev.core.models.platform import Platform, PlatformInfo
from kopsdev.core.models.settings import ClusterSettings, Settings, ToolPolicy
from kopsdev.core.models.task import TaskSpec
from kopsdev.core.models.tool import TOOL_NAMES, ToolVersion

__all__ = [
    "TOOL_NAMES",
    "ClusterSettings",
    "CommandSpec",
    "InstallOptions",
    "InstallReport",
    "InstallStep",
    "Platform",
    "PlatformInfo",
    "Receipt",
    "Settings",
    "StepResult",
    "TaskSpec",
    "ToolPolicy",
    "ToolVersion",
]
