"""
Task catalog — named shortcuts forwarding to external binaries.

Cluster tasks drive ``k3d``; package tasks drive ``cargo`` against the
kops workspace. Parameters are substituted into the argument list,
never into a shell string, and the binary's output is passed through
unmodified.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from kopsdev.core.errors import UnknownTaskError
from kopsdev.core.models.settings import Settings
from kopsdev.core.models.task import TaskSpec
from kopsdev.core.services.executor import CommandExecutor

logger = logging.getLogger(__name__)


def _task(name: str, description: str, *argv: str, message: str = "",
          param: str | None = None) -> TaskSpec:
    return TaskSpec(name=name, description=description, argv=argv,
                    message=message, param=param)


TASKS: dict[str, TaskSpec] = {t.name: t for t in (
    # k3d cluster management
    _task("cluster-create", "Create a k3d cluster",
          "k3d", "cluster", "create", "{name}",
          message="Creating k3d cluster: {name}", param="CLUSTER"),
    _task("cluster-up", "Start a k3d cluster",
          "k3d", "cluster", "start", "{name}",
          message="Starting k3d cluster: {name}", param="CLUSTER"),
    _task("cluster-down", "Stop a k3d cluster",
          "k3d", "cluster", "stop", "{name}",
          message="Stopping k3d cluster: {name}", param="CLUSTER"),
    _task("cluster-rm", "Delete a k3d cluster",
          "k3d", "cluster", "delete", "{name}",
          message="Deleting k3d cluster: {name}", param="CLUSTER"),
    _task("cluster-info", "Show a k3d cluster",
          "k3d", "cluster", "list", "{name}",
          param="CLUSTER"),
    # kops packages
    _task("build", "Build a kops package (release profile)",
          "cargo", "build", "--release", "-p", "{name}",
          message="Building {name}", param="PACKAGE"),
    _task("install", "Install a kops package into ~/.cargo/bin",
          "cargo", "install", "--locked", "--path", "{name}",
          message="Installing {name}", param="PACKAGE"),
    _task("audit", "Audit dependencies for known vulnerabilities",
          "cargo", "audit"),
)}

# Tasks implemented in-process rather than by forwarding.
BUILTIN_TASKS: dict[str, str] = {
    "setup": "Install docker, kubectl and k3d",
    "setup-dry": "Dry-run setup (do not install)",
    "versions": "Print the installation summary",
}


def get_task(name: str) -> TaskSpec:
    try:
        return TASKS[name]
    except KeyError:
        raise UnknownTaskError(f"Unknown task: {name}") from None


def list_tasks() -> list[tuple[str, str]]:
    """``(usage, description)`` for every task, sorted by name."""
    rows = [
        (f"{t.name} {t.param}" if t.param else t.name, t.description)
        for t in TASKS.values()
    ]
    rows.extend(BUILTIN_TASKS.items())
    return sorted(rows)


def resolve_param(task: TaskSpec, value: str | None, settings: Settings) -> str | None:
    """Validate or default the task's positional parameter.

    Cluster tasks default to ``cluster.default_name``. Package tasks
    require one of ``settings.packages``.

    Raises:
        UnknownTaskError: missing or unknown package name.
    """
    if task.param is None:
        return None
    if task.param == "CLUSTER":
        return value or settings.cluster.default_name
    if not value:
        raise UnknownTaskError(
            f"{task.name} needs a package: {', '.join(settings.packages)}"
        )
    if value not in settings.packages:
        raise UnknownTaskError(
            f"Unknown package: {value} (expected one of {', '.join(settings.packages)})"
        )
    return value


def run_task(
    name: str,
    value: str | None = None,
    *,
    settings: Settings | None = None,
    executor: CommandExecutor | None = None,
    announce: Callable[[str], None] | None = None,
) -> int:
    """Forward a catalog task to its binary; return the exit status.

    ``announce`` receives the task message (if any) before the command runs.
    """
    settings = settings or Settings()
    task = get_task(name)
    value = resolve_param(task, value, settings)
    command = task.render(value)
    executor = executor or CommandExecutor(use_sudo=False)

    if announce is not None and task.message:
        announce(task.render_message(value))

    logger.debug("Task %s → %s", name, command.display())
    return executor.passthrough(command)
