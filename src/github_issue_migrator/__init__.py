"""
GitHub Issue Migration Tool

Interactively migrates issues and their comments from one GitHub repository to
another, preserving authorship attribution, cross-references and open/closed
state.
"""

from __future__ import annotations

from .cli import main
from .config import MigrationConfig, RepoConfig, UserToken, load_config
from .exceptions import ConfigError, MigrationError
from .migrator import BatchResult, IssueMigrator, MigrationContext
from .tracker import IssueTracker
from .utils import setup_logging

# Package version
__version__ = "0.1.0"

__all__ = [
    "BatchResult",
    "ConfigError",
    "IssueMigrator",
    "IssueTracker",
    "MigrationConfig",
    "MigrationContext",
    "MigrationError",
    "RepoConfig",
    "UserToken",
    "load_config",
    "main",
    "setup_logging",
]
