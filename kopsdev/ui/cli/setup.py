"""
CLI commands for the workstation installer.

``setup`` is also installed on its own as the ``kops-setup`` script.
Thin wrappers over ``kopsdev.core.services.installer`` and
``kopsdev.core.services.tool_version``.
"""

from __future__ import annotations

import json
import sys
from typing import Any

import click

from kopsdev.core.errors import KopsDevError
from kopsdev.core.models.options import InstallOptions
from kopsdev.core.models.plan import InstallStep, StepResult
from kopsdev.core.models.settings import Settings
from kopsdev.core.observability.logging_config import resolve_level, setup_logging
from kopsdev.core.services.executor import DRY_RUN_MARKER, CommandExecutor
from kopsdev.core.services.installer import run_install
from kopsdev.core.services.platform_detect import detect_platform
from kopsdev.core.services.tool_version import collect_versions, render_summary
from kopsdev.ui.cli.helpers import fail, load_settings_or_exit


class SetupCommand(click.Command):
    """A click command whose usage errors exit with status 1."""

    def make_context(
        self,
        info_name: str | None,
        args: list[str],
        parent: click.Context | None = None,
        **extra: Any,
    ) -> click.Context:
        try:
            return super().make_context(info_name, args, parent=parent, **extra)
        except click.UsageError as e:
            e.exit_code = 1
            raise


# ── Output ──────────────────────────────────────────────────────


def _echo_start(step: InstallStep) -> None:
    if step.kind != "skip":
        click.echo(step.label)


def _echo_result(result: StepResult) -> None:
    step, receipt = result.step, result.receipt

    if receipt.status == "skipped":
        click.secho(f"   ⊘ {step.label}", fg="yellow")
    elif receipt.status == "dry_run":
        click.echo(f"   {DRY_RUN_MARKER} {receipt.command}")
    elif receipt.tolerated:
        click.secho(
            f"   ⚠️  {step.tool} install failed, continuing: {receipt.error}",
            fg="yellow",
        )
    elif receipt.failed:
        click.secho(f"   ✗ {receipt.command}: {receipt.error}", fg="red", err=True)
    else:
        click.secho(f"   ✓ {receipt.command}", fg="green")


def echo_summary() -> None:
    """Probe the host and print the installation summary."""
    click.echo()
    for line in render_summary(collect_versions()):
        click.echo(line)


# ── Runner ──────────────────────────────────────────────────────


def _run_setup_json(options: InstallOptions, settings: Settings) -> int:
    """Run the installer silently and print the report as JSON."""
    try:
        report = run_install(
            options,
            settings,
            info=detect_platform(),
            executor=CommandExecutor(dry_run=options.dry_run),
        )
    except KopsDevError as e:
        fail(str(e))

    result = report.to_dict()
    result["versions"] = [v.model_dump() for v in collect_versions()]
    click.echo(json.dumps(result, indent=2))
    return 1 if report.halted else 0


def run_setup(options: InstallOptions, settings: Settings, as_json: bool = False) -> int:
    """Run the installer and print progress; return the exit status."""
    if as_json:
        return _run_setup_json(options, settings)

    info = detect_platform()
    click.echo(f"Detected OS: {info.label}")
    if options.dry_run:
        click.secho("   Mode: dry-run (nothing will be installed)", fg="yellow")

    try:
        report = run_install(
            options,
            settings,
            info=info,
            executor=CommandExecutor(dry_run=options.dry_run),
            on_start=_echo_start,
            on_step=_echo_result,
        )
    except KopsDevError as e:
        fail(str(e))

    echo_summary()

    failed = report.failed_step
    if failed is not None:
        click.secho(
            f"❌ Setup halted: {failed.step.tool or 'index refresh'} failed",
            fg="red",
            err=True,
        )
        return 1

    click.echo("Done.")
    return 0


@click.command("setup", cls=SetupCommand)
@click.option("--dry-run", is_flag=True, help="Print commands instead of running them.")
@click.option("--no-k3d", is_flag=True, help="Do not install k3d.")
@click.option("--no-docker", is_flag=True, help="Do not install docker.")
@click.option("--no-kubectl", is_flag=True, help="Do not install kubectl.")
@click.option("--verbose", is_flag=True, help="Trace every command as it runs.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output the report as JSON.")
@click.pass_context
def setup(
    ctx: click.Context,
    dry_run: bool,
    no_k3d: bool,
    no_docker: bool,
    no_kubectl: bool,
    verbose: bool,
    as_json: bool,
) -> None:
    """Install docker, kubectl and k3d for this platform.

    Tools already on PATH are left alone. A version summary is printed
    at the end, also in dry-run mode.

    Examples:

        kops-setup --dry-run

        kops-setup --no-docker --verbose
    """
    obj = ctx.ensure_object(dict)
    if verbose or "log_level" not in obj:
        setup_logging(resolve_level(debug=obj.get("debug", False), verbose=verbose))

    options = InstallOptions(
        dry_run=dry_run,
        install_k3d=not no_k3d,
        install_docker=not no_docker,
        install_kubectl=not no_kubectl,
        verbose=verbose,
    )
    settings = load_settings_or_exit(ctx)
    sys.exit(run_setup(options, settings, as_json=as_json))


@click.command("setup-dry")
@click.pass_context
def setup_dry(ctx: click.Context) -> None:
    """Dry-run setup (do not install)."""
    ctx.invoke(setup, dry_run=True)


@click.command("versions")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def versions(as_json: bool) -> None:
    """Print the installation summary for docker, kubectl and k3d."""
    if as_json:
        result = [v.model_dump() for v in collect_versions()]
        click.echo(json.dumps(result, indent=2))
        return

    echo_summary()
