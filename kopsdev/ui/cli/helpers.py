"""
Shared CLI helpers — settings resolution and fatal-error output.
"""

from __future__ import annotations

import sys
from typing import NoReturn

import click

from kopsdev.core.errors import ConfigError
from kopsdev.core.models.settings import Settings


def fail(message: str) -> NoReturn:
    """Print ``❌ message`` to stderr and exit 1."""
    click.secho(f"❌ {message}", fg="red", err=True)
    sys.exit(1)


def load_settings_or_exit(ctx: click.Context) -> Settings:
    """Load kops.yml for this invocation, exiting 1 on a bad config."""
    from kopsdev.core.config.loader import load_settings

    obj = ctx.find_object(dict) or {}
    try:
        return load_settings(obj.get("config_path"))
    except ConfigError as e:
        fail(str(e))
