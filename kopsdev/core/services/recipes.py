"""
Tool recipes — how each prerequisite is installed and probed.

Per tool:
    cli         executable looked up on PATH
    install     platform → argv (package-manager front-end)
    needs_sudo  platform → bool
    version     argv whose first stdout line is the reported version

k3d has no ``install`` table: it always uses the vendor install
script (see ``k3d_install_command``), identical on every platform.
"""

from __future__ import annotations

import shlex

from kopsdev.core.models.command import CommandSpec
from kopsdev.core.models.platform import Platform

TOOL_RECIPES: dict[str, dict] = {
    "docker": {
        "cli": "docker",
        "install": {
            Platform.MACOS:  ["brew", "install", "docker"],
            Platform.DEBIAN: ["apt-get", "install", "-y", "docker.io"],
            Platform.ALPINE: ["apk", "add", "--no-cache", "docker"],
            Platform.ARCH:   ["pacman", "-S", "--noconfirm", "docker"],
        },
        "needs_sudo": {
            Platform.MACOS: False, Platform.DEBIAN: True,
            Platform.ALPINE: True, Platform.ARCH: True,
        },
        "version": ["docker", "--version"],
    },
    "kubectl": {
        "cli": "kubectl",
        "install": {
            Platform.MACOS:  ["brew", "install", "kubernetes-cli"],
            Platform.DEBIAN: ["apt-get", "install", "-y", "kubectl"],
            Platform.ALPINE: ["apk", "add", "--no-cache", "kubectl"],
            Platform.ARCH:   ["pacman", "-S", "--noconfirm", "kubectl"],
        },
        "needs_sudo": {
            Platform.MACOS: False, Platform.DEBIAN: True,
            Platform.ALPINE: True, Platform.ARCH: True,
        },
        "version": ["kubectl", "version", "--client"],
    },
    "k3d": {
        "cli": "k3d",
        "version": ["k3d", "version"],
    },
}

# Package-index refresh run once before the first package install.
INDEX_REFRESH: dict[Platform, list[str]] = {
    Platform.DEBIAN: ["apt-get", "update"],
    Platform.ARCH:   ["pacman", "-Sy", "--noconfirm"],
}

# Front-end that must exist before anything is attempted.
REQUIRED_FRONTENDS: dict[Platform, tuple[str, str]] = {
    Platform.MACOS: ("brew", "Homebrew required: https://brew.sh/"),
}


def install_command(tool: str, platform: Platform) -> CommandSpec:
    """Package-manager install command for ``tool`` on ``platform``."""
    recipe = TOOL_RECIPES[tool]
    argv = recipe["install"][platform]
    return CommandSpec.of(*argv, needs_sudo=recipe["needs_sudo"][platform])


def k3d_install_command(url: str) -> CommandSpec:
    """Vendor install script, fetched and piped to ``sh``."""
    return CommandSpec.of("sh", "-c", f"curl -s {shlex.quote(url)} | sh")


def refresh_command(platform: Platform) -> CommandSpec | None:
    argv = INDEX_REFRESH.get(platform)
    if argv is None:
        return None
    return CommandSpec.of(*argv, needs_sudo=True)
