"""
Custom exception classes for the GitHub issue migration tool.
"""

from __future__ import annotations


class MigrationError(Exception):
    """Base exception for migration errors."""


class ConfigError(MigrationError):
    """Raised when the migration configuration is missing or invalid."""
