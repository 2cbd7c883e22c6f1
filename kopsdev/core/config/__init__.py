"""Settings loading (kops.yml)."""
