"""
Install plan and report models.

The resolver produces an ordered list of InstallStep; the orchestrator
pairs each step with the Receipt it produced and wraps them in an
InstallReport.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from kopsdev.core.models.command import CommandSpec, Receipt
from kopsdev.core.models.platform import PlatformInfo


class InstallStep(BaseModel):
    """One planned installer action."""

    tool: str                                  # docker, kubectl, k3d, or "" for refresh
    kind: Literal["refresh", "install", "skip"]
    label: str
    command: CommandSpec | None = None
    reason: str = ""                           # skip reason
    allow_failure: bool = False


class StepResult(BaseModel):
    """A step together with its outcome."""

    step: InstallStep
    receipt: Receipt


class InstallReport(BaseModel):
    """Outcome of an installer run."""

    platform: PlatformInfo
    dry_run: bool = False
    results: list[StepResult] = Field(default_factory=list)
    halted: bool = False

    @property
    def status(self) -> str:
        return "failed" if self.halted else "ok"

    @property
    def failed_step(self) -> StepResult | None:
        """The step that halted the run, if any."""
        if not self.halted:
            return None
        for result in reversed(self.results):
            if result.receipt.failed and not result.receipt.tolerated:
                return result
        return None

    @property
    def executed(self) -> list[StepResult]:
        """Steps that ran a command (real or simulated)."""
        return [r for r in self.results if r.step.kind != "skip"]

    def to_dict(self) -> dict[str, Any]:
        return {
            "platform": self.platform.model_dump(mode="json"),
            "dry_run": self.dry_run,
            "status": self.status,
            "executed": len(self.executed),
            "steps": [
                {
                    "tool": r.step.tool,
                    "kind": r.step.kind,
                    "label": r.step.label,
                    "reason": r.step.reason,
                    "status": r.receipt.status,
                    "command": r.receipt.command,
                    "error": r.receipt.error,
                    "tolerated": r.receipt.tolerated,
                    "duration_ms": r.receipt.duration_ms,
                }
                for r in self.results
            ],
        }
