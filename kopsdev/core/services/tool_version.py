"""
Tool version probes and the installation summary.

Read-only: runs each tool's version command and keeps the first
non-empty stdout line. Reflects what is actually on the host, so it
runs after dry runs and skipped installs too.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from collections.abc import Callable, Iterable

from kopsdev.core.models.tool import (
    TOOL_NAMES,
    VERSION_NOT_INSTALLED,
    VERSION_UNKNOWN,
    ToolVersion,
)
from kopsdev.core.services.recipes import TOOL_RECIPES

logger = logging.getLogger(__name__)

SUMMARY_HEADER = "========== INSTALLATION SUMMARY =========="
SUMMARY_FOOTER = "=" * len(SUMMARY_HEADER)

Which = Callable[[str], str | None]
Runner = Callable[[list[str]], str]


def _probe_stdout(cmd: list[str]) -> str:
    """Run a version command; stdout only, exit status ignored."""
    result = subprocess.run(
        cmd, capture_output=True, text=True, check=False,
    )
    return result.stdout or ""


def first_line(output: str) -> str:
    """First non-empty line of ``output``, stripped, or ``""``."""
    for line in output.splitlines():
        if line.strip():
            return line.strip()
    return ""


def get_tool_version(
    tool: str,
    *,
    which: Which | None = None,
    runner: Runner = _probe_stdout,
) -> ToolVersion:
    """Probe one tool.

    ``"not installed"`` when its executable is not on PATH,
    ``"unknown"`` when the probe yields nothing usable.
    """
    recipe = TOOL_RECIPES[tool]
    which = which or shutil.which
    path = which(recipe["cli"])
    if not path:
        return ToolVersion(tool=tool, installed=False, version=VERSION_NOT_INSTALLED)

    try:
        version = first_line(runner(recipe["version"]))
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("Version probe for %s failed: %s", tool, e)
        version = ""

    return ToolVersion(
        tool=tool,
        installed=True,
        version=version or VERSION_UNKNOWN,
        path=path,
    )


def collect_versions(
    tools: Iterable[str] = TOOL_NAMES,
    *,
    which: Which | None = None,
    runner: Runner = _probe_stdout,
) -> list[ToolVersion]:
    """Probe every tool, in report order."""
    return [get_tool_version(t, which=which, runner=runner) for t in tools]


def render_summary(versions: Iterable[ToolVersion]) -> list[str]:
    """Fixed-format summary block, one string per line."""
    lines = [SUMMARY_HEADER]
    lines.extend(f"{v.tool}: {v.version}" for v in versions)
    lines.append(SUMMARY_FOOTER)
    return lines
