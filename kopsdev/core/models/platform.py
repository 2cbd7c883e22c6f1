"""
Platform descriptor — the closed set of hosts the installer handles.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from kopsdev.core.errors import UnsupportedPlatformError


class Platform(StrEnum):
    """Install handler variants.

    ``UNSUPPORTED`` has no handler; it always fails fast.
    """

    MACOS = "macos"
    DEBIAN = "debian"      # ubuntu, debian
    ALPINE = "alpine"
    ARCH = "arch"          # arch, artix
    UNSUPPORTED = "unsupported"


class PlatformInfo(BaseModel):
    """Result of platform detection."""

    model_config = ConfigDict(frozen=True)

    platform: Platform
    system: str                 # uname -s
    distro_id: str = ""         # os-release ID= on Linux
    machine: str = ""

    @property
    def supported(self) -> bool:
        return self.platform is not Platform.UNSUPPORTED

    @property
    def label(self) -> str:
        """Human-readable label, e.g. ``Linux (ubuntu)``."""
        if self.distro_id:
            return f"{self.system} ({self.distro_id})"
        return self.system

    def require_supported(self) -> PlatformInfo:
        """Return self, or raise naming the unsupported OS / distro."""
        if self.supported:
            return self
        if self.system == "Linux":
            raise UnsupportedPlatformError(
                f"Unsupported Linux distro: {self.distro_id or 'unknown'}"
            )
        raise UnsupportedPlatformError(f"Unsupported OS: {self.system or 'unknown'}")
