"""
CLI commands for the kops cargo packages.

Thin wrappers over ``kopsdev.core.services.tasks``.
"""

from __future__ import annotations

import click

from kopsdev.ui.cli.cluster import forward_task


@click.command("build")
@click.argument("package")
@click.pass_context
def build(ctx: click.Context, package: str) -> None:
    """Build PACKAGE (kopsd, kopsctl) with cargo --release."""
    forward_task(ctx, "build", package)


@click.command("install")
@click.argument("package")
@click.pass_context
def install(ctx: click.Context, package: str) -> None:
    """Install PACKAGE (kopsd, kopsctl) with cargo install."""
    forward_task(ctx, "install", package)


@click.command("audit")
@click.pass_context
def audit(ctx: click.Context) -> None:
    """Audit cargo dependencies (cargo audit)."""
    forward_task(ctx, "audit")
