"""
Platform detection — map the host to a ``Platform`` variant.

Read-only: ``platform.system()``, ``platform.machine()`` and
``/etc/os-release``. Never raises; an unknown host comes back as
``Platform.UNSUPPORTED`` and callers fail fast via
``PlatformInfo.require_supported()``.
"""

from __future__ import annotations

import logging
import platform
from pathlib import Path

from kopsdev.core.models.platform import Platform, PlatformInfo

logger = logging.getLogger(__name__)

OS_RELEASE = Path("/etc/os-release")

# os-release ID → install handler
_DISTRO_FAMILIES: dict[str, Platform] = {
    "ubuntu": Platform.DEBIAN,
    "debian": Platform.DEBIAN,
    "alpine": Platform.ALPINE,
    "arch": Platform.ARCH,
    "artix": Platform.ARCH,
}


def parse_os_release(text: str) -> dict[str, str]:
    """Parse os-release ``KEY=value`` lines; quotes are stripped."""
    fields: dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        fields[key.strip()] = value.strip().strip("\"'")
    return fields


def read_distro_id(os_release: Path = OS_RELEASE) -> str:
    """Return the lowercased ``ID`` from os-release, or ``unknown``."""
    try:
        text = os_release.read_text(encoding="utf-8")
    except OSError:
        logger.warning("Cannot read %s", os_release)
        return "unknown"
    return parse_os_release(text).get("ID", "").lower() or "unknown"


def detect_platform(
    system: str | None = None,
    *,
    os_release: Path = OS_RELEASE,
    machine: str | None = None,
) -> PlatformInfo:
    """Detect the host platform.

    Args:
        system: ``uname -s`` value; defaults to ``platform.system()``.
        os_release: os-release file consulted on Linux.
        machine: CPU architecture; defaults to ``platform.machine()``.
    """
    system = system if system is not None else platform.system()
    machine = machine if machine is not None else platform.machine()

    if system == "Darwin":
        info = PlatformInfo(platform=Platform.MACOS, system=system, machine=machine)
    elif system == "Linux":
        distro_id = read_distro_id(os_release)
        info = PlatformInfo(
            platform=_DISTRO_FAMILIES.get(distro_id, Platform.UNSUPPORTED),
            system=system,
            distro_id=distro_id,
            machine=machine,
        )
    else:
        info = PlatformInfo(platform=Platform.UNSUPPORTED, system=system, machine=machine)

    logger.info("Detected OS: %s → %s", info.label, info.platform.value)
    return info
