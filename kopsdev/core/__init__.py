"""Core layer — models, configuration, and services."""
