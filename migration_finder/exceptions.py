"""
Migration Finder Exceptions

This module defines the errors raised while discovering migrations on disk.
"""

from __future__ import annotations

import os


class FinderError(Exception):
    """Base class for recoverable migration discovery errors."""


class InvalidDirectoryError(FinderError):
    """Raised when the migrations path does not resolve to a directory."""

    def __init__(self, path: str | os.PathLike[str]):
        self.path = str(path)
        super().__init__(
            f'Cannot load migrations from "{self.path}" because it is not a valid directory'
        )


class NameIsReservedError(FinderError):
    """Raised when a migration's version collides with a reserved value."""

    def __init__(self, version: str):
        self.version = version
        super().__init__(
            f'Cannot load a migration with the name "{version}" because it is reserved'
        )


class MigrationLoadError(ImportError):
    """Raised when a migration file cannot be loaded into the process."""

    def __init__(self, path: str | os.PathLike[str], reason: str):
        super().__init__(f"Cannot load migration file {path}: {reason}", path=str(path))


class ConfigurationError(Exception):
    """Raised when finder settings are missing or invalid."""
