"""
CLI commands for local k3d clusters.

Thin wrappers over ``kopsdev.core.services.tasks``: each command
forwards to ``k3d cluster …`` and exits with k3d's status.
"""

from __future__ import annotations

import sys

import click

from kopsdev.core.errors import KopsDevError
from kopsdev.ui.cli.helpers import fail, load_settings_or_exit


def forward_task(ctx: click.Context, task: str, value: str | None = None) -> None:
    """Run a catalog task and exit with its status."""
    from kopsdev.core.services.tasks import run_task

    settings = load_settings_or_exit(ctx)
    try:
        code = run_task(task, value, settings=settings, announce=click.echo)
    except KopsDevError as e:
        fail(str(e))
    sys.exit(code)


@click.group("cluster")
def cluster() -> None:
    """k3d clusters — create, start, stop, delete, inspect.

    NAME defaults to ``cluster.default_name`` in kops.yml (``kops``).
    """


@cluster.command("create")
@click.argument("name", required=False)
@click.pass_context
def create(ctx: click.Context, name: str | None) -> None:
    """Create a k3d cluster."""
    forward_task(ctx, "cluster-create", name)


@cluster.command("up")
@click.argument("name", required=False)
@click.pass_context
def up(ctx: click.Context, name: str | None) -> None:
    """Start a k3d cluster."""
    forward_task(ctx, "cluster-up", name)


@cluster.command("down")
@click.argument("name", required=False)
@click.pass_context
def down(ctx: click.Context, name: str | None) -> None:
    """Stop a k3d cluster."""
    forward_task(ctx, "cluster-down", name)


@cluster.command("rm")
@click.argument("name", required=False)
@click.pass_context
def rm(ctx: click.Context, name: str | None) -> None:
    """Delete a k3d cluster."""
    forward_task(ctx, "cluster-rm", name)


@cluster.command("info")
@click.argument("name", required=False)
@click.pass_context
def info(ctx: click.Context, name: str | None) -> None:
    """Show a k3d cluster."""
    forward_task(ctx, "cluster-info", name)
