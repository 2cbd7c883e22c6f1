"""
CommandSpec and Receipt models — the execution contract.

A CommandSpec is a program plus an argument list, never an interpolated
shell string. The executor turns a CommandSpec into a Receipt. Failures
are captured in the Receipt; the executor never raises for a failing
sub-process.
"""

from __future__ import annotations

import shlex
from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class CommandSpec(BaseModel):
    """A structured command: ``program`` + ``args``."""

    model_config = ConfigDict(frozen=True)

    program: str
    args: tuple[str, ...] = ()
    needs_sudo: bool = False

    @classmethod
    def of(cls, *argv: str, needs_sudo: bool = False) -> CommandSpec:
        """Build from a flat argv: ``CommandSpec.of("apk", "add", "docker")``."""
        return cls(program=argv[0], args=tuple(argv[1:]), needs_sudo=needs_sudo)

    def argv(self, use_sudo: bool = False) -> list[str]:
        """Argument vector for ``subprocess``, sudo-prefixed when required."""
        argv = [self.program, *self.args]
        if self.needs_sudo and use_sudo:
            argv = ["sudo", *argv]
        return argv

    def display(self, use_sudo: bool = False) -> str:
        """Shell-quoted rendering for logs and dry-run output."""
        return shlex.join(self.argv(use_sudo))


class Receipt(BaseModel):
    """Result of running (or simulating) one command."""

    status: Literal["ok", "skipped", "failed", "dry_run"] = "ok"
    command: str = ""
    return_code: int | None = None
    error: str | None = None
    reason: str = ""            # why a step was skipped
    tolerated: bool = False     # failure swallowed by the tool's policy

    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        """Whether the step counts as done (executed, simulated, or skipped)."""
        return self.status != "failed" or self.tolerated

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @classmethod
    def success(cls, command: str, **kwargs: Any) -> Receipt:
        """Create a success receipt."""
        return cls(status="ok", command=command, return_code=0, **kwargs)

    @classmethod
    def failure(cls, command: str, error: str, **kwargs: Any) -> Receipt:
        """Create a failure receipt."""
        return cls(status="failed", command=command, error=error, **kwargs)

    @classmethod
    def simulated(cls, command: str) -> Receipt:
        """Create a dry-run receipt (nothing executed)."""
        return cls(status="dry_run", command=command)

    @classmethod
    def skip(cls, reason: str = "") -> Receipt:
        """Create a skip receipt."""
        return cls(status="skipped", reason=reason)
