"""
Installer orchestration — resolve a plan, then execute it.

    detect platform → resolve_install_plan() → execute_plan() → report

Planning is pure given the platform, the options and a ``which``
lookup, so a dry run and a real run on the same host produce the same
command sequence.

Each ``Platform`` variant has exactly one planning handler.
``Platform.UNSUPPORTED`` maps to a handler that always raises.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable

from kopsdev.core.errors import MissingDependencyError
from kopsdev.core.models.command import Receipt
from kopsdev.core.models.options import InstallOptions
from kopsdev.core.models.plan import InstallReport, InstallStep, StepResult
from kopsdev.core.models.platform import Platform, PlatformInfo
from kopsdev.core.models.settings import Settings
from kopsdev.core.models.tool import TOOL_NAMES
from kopsdev.core.services.executor import CommandExecutor
from kopsdev.core.services.platform_detect import detect_platform
from kopsdev.core.services.recipes import (
    REQUIRED_FRONTENDS,
    TOOL_RECIPES,
    install_command,
    k3d_install_command,
    refresh_command,
)

logger = logging.getLogger(__name__)

Which = Callable[[str], str | None]
StepCallback = Callable[[StepResult], None]
StartCallback = Callable[[InstallStep], None]


# ── Planning ────────────────────────────────────────────────────


def _plan_tools(
    platform: Platform,
    options: InstallOptions,
    settings: Settings,
    which: Which,
) -> list[InstallStep]:
    """One step per tool, in install order."""
    steps: list[InstallStep] = []
    for tool in TOOL_NAMES:
        recipe = TOOL_RECIPES[tool]
        allow_failure = settings.policy(tool).tolerates(platform)

        if not options.is_enabled(tool):
            steps.append(InstallStep(
                tool=tool, kind="skip", label=f"Skipping {tool}", reason="disabled",
            ))
            continue

        if which(recipe["cli"]):
            steps.append(InstallStep(
                tool=tool, kind="skip", label=f"{tool} already installed",
                reason="already installed",
            ))
            continue

        if tool == "k3d":
            command = k3d_install_command(settings.k3d_install_url)
        else:
            command = install_command(tool, platform)

        steps.append(InstallStep(
            tool=tool,
            kind="install",
            label=f"Installing {tool}...",
            command=command,
            allow_failure=allow_failure,
        ))
    return steps


def _with_index_refresh(platform: Platform, steps: list[InstallStep]) -> list[InstallStep]:
    """Insert the package-index refresh before the first package install.

    Nothing is inserted when no package-manager install is pending.
    """
    command = refresh_command(platform)
    if command is None:
        return steps
    for i, step in enumerate(steps):
        if step.kind == "install" and "install" in TOOL_RECIPES[step.tool]:
            refresh = InstallStep(
                tool="", kind="refresh", label=f"Updating {command.program}...",
                command=command,
            )
            return steps[:i] + [refresh] + steps[i:]
    return steps


def _require_frontend(platform: Platform, which: Which) -> None:
    required = REQUIRED_FRONTENDS.get(platform)
    if required is None:
        return
    program, message = required
    if not which(program):
        raise MissingDependencyError(message)


def _plan_macos(info, options, settings, which) -> list[InstallStep]:
    _require_frontend(Platform.MACOS, which)
    return _plan_tools(Platform.MACOS, options, settings, which)


def _plan_debian(info, options, settings, which) -> list[InstallStep]:
    steps = _plan_tools(Platform.DEBIAN, options, settings, which)
    return _with_index_refresh(Platform.DEBIAN, steps)


def _plan_alpine(info, options, settings, which) -> list[InstallStep]:
    return _plan_tools(Platform.ALPINE, options, settings, which)


def _plan_arch(info, options, settings, which) -> list[InstallStep]:
    steps = _plan_tools(Platform.ARCH, options, settings, which)
    return _with_index_refresh(Platform.ARCH, steps)


def _plan_unsupported(info, options, settings, which) -> list[InstallStep]:
    info.require_supported()  # always raises for this variant
    return []


_PLANNERS: dict[Platform, Callable[..., list[InstallStep]]] = {
    Platform.MACOS: _plan_macos,
    Platform.DEBIAN: _plan_debian,
    Platform.ALPINE: _plan_alpine,
    Platform.ARCH: _plan_arch,
    Platform.UNSUPPORTED: _plan_unsupported,
}


def resolve_install_plan(
    options: InstallOptions,
    info: PlatformInfo,
    settings: Settings | None = None,
    *,
    which: Which | None = None,
) -> list[InstallStep]:
    """Build the ordered step list for this host.

    Raises:
        UnsupportedPlatformError: unsupported OS or distro.
        MissingDependencyError: required front-end (Homebrew) missing.
    """
    settings = settings or Settings()
    which = which or shutil.which
    plan = _PLANNERS[info.platform](info, options, settings, which)
    logger.debug(
        "Resolved plan for %s: %s",
        info.platform.value,
        ", ".join(f"{s.kind}:{s.tool or 'index'}" for s in plan) or "(empty)",
    )
    return plan


# ── Execution ───────────────────────────────────────────────────


def execute_plan(
    plan: list[InstallStep],
    executor: CommandExecutor,
    *,
    on_start: StartCallback | None = None,
    on_step: StepCallback | None = None,
) -> tuple[list[StepResult], bool]:
    """Run steps in order; stop at the first failure not allowed by policy.

    No retries, no rollback. ``on_start`` fires before a step runs,
    ``on_step`` after, with its result.

    Returns:
        ``(results, halted)``.
    """
    results: list[StepResult] = []

    for step in plan:
        logger.info("%s", step.label)
        if on_start is not None:
            on_start(step)
        if step.kind == "skip" or step.command is None:
            receipt = Receipt.skip(step.reason)
        else:
            receipt = executor.run(step.command)
            if receipt.failed and step.allow_failure:
                logger.warning(
                    "%s install failed, continuing (allow_failure): %s",
                    step.tool, receipt.error,
                )
                receipt = receipt.model_copy(update={"tolerated": True})

        result = StepResult(step=step, receipt=receipt)
        results.append(result)
        if on_step is not None:
            on_step(result)

        if receipt.failed and not receipt.tolerated:
            logger.error("Halting: %s failed: %s", step.tool or "index refresh", receipt.error)
            return results, True

    return results, False


def run_install(
    options: InstallOptions,
    settings: Settings | None = None,
    *,
    info: PlatformInfo | None = None,
    executor: CommandExecutor | None = None,
    which: Which | None = None,
    on_start: StartCallback | None = None,
    on_step: StepCallback | None = None,
) -> InstallReport:
    """Detect, plan and execute an installer run.

    Raises:
        UnsupportedPlatformError, MissingDependencyError: before any
            command is run.
    """
    info = info or detect_platform()
    executor = executor or CommandExecutor(dry_run=options.dry_run)

    plan = resolve_install_plan(options, info, settings, which=which)
    results, halted = execute_plan(
        plan, executor, on_start=on_start, on_step=on_step,
    )

    return InstallReport(
        platform=info,
        dry_run=options.dry_run,
        results=results,
        halted=halted,
    )
