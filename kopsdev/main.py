"""
kopsdev — CLI entrypoint.

Usage:
    kopsdev --help
    kopsdev setup --dry-run
    kopsdev cluster create dev
    kopsdev tasks
"""

from __future__ import annotations

from pathlib import Path

import click

from kopsdev import __version__
from kopsdev.core.config.loader import CONFIG_ENV
from kopsdev.core.observability.logging_config import resolve_level, setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="kopsdev")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help=f"Path to kops.yml (default: ${CONFIG_ENV}, then auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """kopsdev — workstation setup and tasks for kops development."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    level = resolve_level(debug=debug, verbose=verbose, quiet=quiet)
    ctx.obj["log_level"] = level
    setup_logging(level=level)


@cli.command("tasks")
def tasks() -> None:
    """List available tasks."""
    from kopsdev.core.services.tasks import list_tasks

    rows = list_tasks()
    width = max(len(usage) for usage, _ in rows)
    click.secho("Available tasks:", bold=True)
    for usage, description in rows:
        click.echo(f"    {usage.ljust(width)}  # {description}")


# ── Register sub-commands from kopsdev/ui/cli/ ──────────────────

from kopsdev.ui.cli.cluster import cluster
from kopsdev.ui.cli.packages import audit, build, install
from kopsdev.ui.cli.setup import setup, setup_dry, versions

cli.add_command(setup)
cli.add_command(setup_dry)
cli.add_command(versions)
cli.add_command(cluster)
cli.add_command(build)
cli.add_command(install)
cli.add_command(audit)


if __name__ == "__main__":
    cli()
