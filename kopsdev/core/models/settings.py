"""
Settings model — loaded from kops.yml.

Every field has a default, so an absent file is a valid configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from kopsdev.core.models.platform import Platform
from kopsdev.core.models.tool import TOOL_NAMES

DEFAULT_K3D_INSTALL_URL = "https://raw.githubusercontent.com/k3d-io/k3d/main/install.sh"


class ToolPolicy(BaseModel):
    """Per-tool install policy.

    ``allow_failure``: a failing install command is logged and the run
    continues instead of halting.
    ``platforms``: limit ``allow_failure`` to these platforms (``None``: all).
    """

    model_config = ConfigDict(extra="forbid")

    allow_failure: bool = False
    platforms: list[Platform] | None = None

    def tolerates(self, platform: Platform) -> bool:
        """Whether a failed install on ``platform`` lets the run continue."""
        if not self.allow_failure:
            return False
        return self.platforms is None or platform in self.platforms


def _default_policies() -> dict[str, ToolPolicy]:
    # kubectl is not in the stock Debian/Ubuntu repositories, so only its
    # apt install is allowed to fail.
    return {
        "docker": ToolPolicy(),
        "kubectl": ToolPolicy(allow_failure=True, platforms=[Platform.DEBIAN]),
        "k3d": ToolPolicy(),
    }


class ClusterSettings(BaseModel):
    """Defaults for the k3d cluster tasks."""

    model_config = ConfigDict(extra="forbid")

    default_name: str = "kops"


class Settings(BaseModel):
    """Root configuration."""

    model_config = ConfigDict(extra="forbid")

    cluster: ClusterSettings = Field(default_factory=ClusterSettings)
    packages: list[str] = Field(default_factory=lambda: ["kopsd", "kopsctl"])
    k3d_install_url: str = DEFAULT_K3D_INSTALL_URL
    tools: dict[str, ToolPolicy] = Field(default_factory=_default_policies)

    @field_validator("tools")
    @classmethod
    def _known_tools(cls, value: dict[str, ToolPolicy]) -> dict[str, ToolPolicy]:
        unknown = sorted(set(value) - set(TOOL_NAMES))
        if unknown:
            raise ValueError(
                f"unknown tool(s) {', '.join(unknown)}; expected {', '.join(TOOL_NAMES)}"
            )
        # Tools not mentioned keep their default policy.
        merged = _default_policies()
        merged.update(value)
        return merged

    @field_validator("k3d_install_url")
    @classmethod
    def _https_only(cls, value: str) -> str:
        if not value.startswith("https://"):
            raise ValueError("k3d_install_url must be an https:// URL")
        return value

    def policy(self, tool: str) -> ToolPolicy:
        return self.tools.get(tool, ToolPolicy())
