"""
Tool identity and version-probe results.
"""

from __future__ import annotations

from pydantic import BaseModel

# Install and report order.
TOOL_NAMES: tuple[str, ...] = ("docker", "kubectl", "k3d")

VERSION_UNKNOWN = "unknown"
VERSION_NOT_INSTALLED = "not installed"


class ToolVersion(BaseModel):
    """What the summary reporter found for one tool on the host."""

    tool: str
    installed: bool = False
    version: str = VERSION_NOT_INSTALLED
    path: str | None = None
