"""
InstallOptions — the parsed flag set for one installer run.

Built once from the command line and passed explicitly to every step.
Frozen: nothing downstream can flip a flag mid-run.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from kopsdev.core.models.tool import TOOL_NAMES


class InstallOptions(BaseModel):
    """Independent boolean toggles controlling the installer."""

    model_config = ConfigDict(frozen=True)

    dry_run: bool = False
    install_docker: bool = True
    install_kubectl: bool = True
    install_k3d: bool = True
    verbose: bool = False

    def is_enabled(self, tool: str) -> bool:
        """Whether installation of ``tool`` was requested."""
        return bool(getattr(self, f"install_{tool}"))

    def enabled_tools(self) -> list[str]:
        """Enabled tools, in install order."""
        return [t for t in TOOL_NAMES if self.is_enabled(t)]
