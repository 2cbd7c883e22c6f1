"""
TaskSpec — one entry of the task catalog.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from kopsdev.core.models.command import CommandSpec


class TaskSpec(BaseModel):
    """A named shortcut that forwards to an external binary.

    ``argv`` may contain ``{name}`` placeholders, substituted per element
    (never through a shell) with the task's positional parameter.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    argv: tuple[str, ...]
    message: str = ""           # printed before running, may use {name}
    param: str | None = None    # label of the positional parameter, if any

    def render(self, value: str | None = None) -> CommandSpec:
        """Substitute the positional parameter and build the command."""
        argv = [part.format(name=value or "") for part in self.argv]
        return CommandSpec.of(*argv)

    def render_message(self, value: str | None = None) -> str:
        return self.message.format(name=value or "")
