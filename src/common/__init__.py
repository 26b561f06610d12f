"""Shared helpers used across the versioning CLI."""
