"""
Error taxonomy for kopsdev.

Usage errors (bad flags) are handled by click. Everything here is an
environment or configuration error: fatal, raised before any install
action, and turned into ``❌ message`` + exit 1 by the CLI layer.

Sub-process failures are never exceptions — they are ``Receipt`` objects.
"""

from __future__ import annotations


class KopsDevError(Exception):
    """Base class for fatal kopsdev errors."""


class UnsupportedPlatformError(KopsDevError):
    """Host OS or Linux distribution has no install handler."""


class MissingDependencyError(KopsDevError):
    """A required front-end (e.g. Homebrew on macOS) is not on PATH."""


class ConfigError(KopsDevError):
    """Raised when kops.yml is invalid or unreadable."""


class UnknownTaskError(KopsDevError):
    """Raised for a task name or task parameter the catalog does not accept."""
