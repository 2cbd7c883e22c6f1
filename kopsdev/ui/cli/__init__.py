"""CLI command groups registered by ``kopsdev.main``."""
