"""
Migration Finder

This package discovers migration classes stored one per file in a directory
and builds an ordered registry mapping each version to its class name.
"""

from .base import AbstractMigration, IrreversibleMigration, MigrationError
from .config import FinderSettings, create_finder, discover_migrations, load_settings
from .exceptions import (
    ConfigurationError,
    FinderError,
    InvalidDirectoryError,
    MigrationLoadError,
    NameIsReservedError,
)
from .finder import Finder, MigrationFinder, build_version_registry
from .finders import GlobFinder, RecursiveRegexFinder
from .loader import MigrationUnit, ModuleLoader

__all__ = [
    "AbstractMigration",
    "ConfigurationError",
    "Finder",
    "FinderError",
    "FinderSettings",
    "GlobFinder",
    "InvalidDirectoryError",
    "IrreversibleMigration",
    "MigrationError",
    "MigrationFinder",
    "MigrationLoadError",
    "MigrationUnit",
    "ModuleLoader",
    "NameIsReservedError",
    "RecursiveRegexFinder",
    "build_version_registry",
    "create_finder",
    "discover_migrations",
    "load_settings",
]
