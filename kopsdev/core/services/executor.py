"""
Command executor — the SINGLE PLACE where sub-processes are started
for install and task operations.

Dry-run and real execution share one call site (``run``), so a dry run
prints exactly the commands a real run would execute.

Sub-process failures come back as ``Receipt`` objects; nothing here
raises for a failing command.
"""

from __future__ import annotations

import logging
import os
import subprocess
import time
from datetime import UTC, datetime

from kopsdev.core.models.command import CommandSpec, Receipt

logger = logging.getLogger(__name__)

DRY_RUN_MARKER = "[dry-run]"


def running_as_root() -> bool:
    return hasattr(os, "geteuid") and os.geteuid() == 0


class CommandExecutor:
    """Run or simulate structured commands.

    Args:
        dry_run: Print instead of execute.
        use_sudo: Prefix ``sudo`` for commands that declare
            ``needs_sudo``. Defaults to "not running as root".
    """

    def __init__(self, *, dry_run: bool = False, use_sudo: bool | None = None) -> None:
        self.dry_run = dry_run
        self.use_sudo = (not running_as_root()) if use_sudo is None else use_sudo

    def render(self, command: CommandSpec) -> str:
        return command.display(self.use_sudo)

    def run(self, command: CommandSpec) -> Receipt:
        """Execute ``command`` (or simulate it in dry-run mode).

        Output is not captured: package managers and install scripts
        write straight to the terminal. No timeout is applied.
        """
        rendered = self.render(command)

        if self.dry_run:
            logger.debug("%s %s", DRY_RUN_MARKER, rendered)
            return Receipt.simulated(rendered)

        logger.info("+ %s", rendered)
        started_at = datetime.now(UTC).isoformat()
        start = time.monotonic()
        try:
            result = subprocess.run(command.argv(self.use_sudo), check=False)
        except OSError as e:
            logger.error("Cannot run %s: %s", command.program, e)
            return Receipt.failure(
                rendered, f"Cannot run {command.program}: {e}", started_at=started_at,
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        if result.returncode == 0:
            return Receipt.success(rendered, started_at=started_at, duration_ms=elapsed_ms)

        logger.warning("Command failed (exit %d): %s", result.returncode, rendered)
        return Receipt.failure(
            rendered,
            f"Command failed (exit {result.returncode})",
            return_code=result.returncode,
            started_at=started_at,
            duration_ms=elapsed_ms,
        )

    def passthrough(self, command: CommandSpec) -> int:
        """Run a task command and return its exit status.

        A command that cannot be started maps to status 1.
        """
        receipt = self.run(command)
        if receipt.status in ("ok", "dry_run"):
            return 0
        return receipt.return_code if receipt.return_code is not None else 1
