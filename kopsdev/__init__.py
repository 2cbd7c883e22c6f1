"""kopsdev — workstation bootstrap and task runner for the kops project."""

__version__ = "0.1.0"
