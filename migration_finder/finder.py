"""
Migration discovery.

The Finder turns a directory of migration files into an ordered registry
mapping each migration's version to the fully-qualified name of its class:

    directory -> canonical path -> candidate files -> loaded files
              -> migration classes -> {version: class name}
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from pathlib import Path

from .base import VERSION_PREFIX_LENGTH, AbstractMigration
from .exceptions import InvalidDirectoryError, NameIsReservedError
from .loader import MigrationUnit, ModuleLoader

LOGGER = logging.getLogger(__name__)

# Version reserved by runners to mean "no migration applied yet"
RESERVED_VERSION = "0"

FileFilter = Callable[[Path], Iterable[Path]]


def version_from_class_name(short_name: str) -> str:
    """Strip the conventional ``Version`` prefix from a class name."""
    return short_name[VERSION_PREFIX_LENGTH:]


def build_version_registry(candidates: Iterable[MigrationUnit]) -> dict[str, str]:
    """
    Map each candidate's version to its fully-qualified class name.

    A later candidate with the same version replaces the earlier one.

    Args:
        candidates: Migration units in declaration order

    Returns:
        Registry sorted by version (plain string order)

    Raises:
        NameIsReservedError: If a version equals the reserved "0"
    """
    versions: dict[str, str] = {}
    for unit in candidates:
        version = version_from_class_name(unit.short_name)

        if version == RESERVED_VERSION:
            raise NameIsReservedError(version)

        if version in versions:
            LOGGER.warning(
                "Migration version %s declared twice: %s replaced by %s",
                version,
                versions[version],
                unit.name,
            )
        versions[version] = unit.name

    return dict(sorted(versions.items()))


class MigrationFinder(ABC):
    """Finds migrations on disk at a given path."""

    @abstractmethod
    def find_migrations(
        self, directory: str | os.PathLike[str], namespace: str | None = None
    ) -> dict[str, str]:
        """
        Find all migrations in a directory.

        Args:
            directory: Directory holding the migration files
            namespace: If given, only classes in this dotted namespace are returned

        Returns:
            Mapping of version to fully-qualified class name, sorted by version
        """


class Finder(MigrationFinder):
    """
    Shared discovery protocol for finders.

    Subclasses only decide which files in the directory are candidates.
    """

    def __init__(self, loader: ModuleLoader | None = None):
        self.loader = loader or ModuleLoader()

    def find(
        self,
        directory: str | os.PathLike[str],
        file_filter: FileFilter,
        namespace: str | None = None,
    ) -> dict[str, str]:
        """
        Run discovery for one directory.

        Raises:
            InvalidDirectoryError: If the directory is missing or not a directory
            NameIsReservedError: If a migration uses the reserved version
            MigrationLoadError: If a candidate file cannot be loaded
        """
        real_dir = self.get_real_path(directory)
        files = list(file_filter(real_dir))
        LOGGER.debug("Found %d candidate migration files in %s", len(files), real_dir)

        return self.load_migrations(files, namespace)

    def get_real_path(self, directory: str | os.PathLike[str]) -> Path:
        """
        Canonicalize a directory path.

        Raises:
            InvalidDirectoryError: If the path cannot be resolved or is not a directory
        """
        try:
            real_dir = Path(directory).resolve(strict=True)
        except (OSError, RuntimeError) as e:
            raise InvalidDirectoryError(directory) from e

        if not real_dir.is_dir():
            raise InvalidDirectoryError(directory)

        return real_dir

    def load_migrations(
        self, files: Iterable[str | os.PathLike[str]], namespace: str | None
    ) -> dict[str, str]:
        """Load the files and build the version registry from their classes."""
        files = list(files)
        if not files:
            return {}

        included_files = self.loader.load_all(files)
        classes = self.load_migration_classes(included_files, namespace)
        versions = build_version_registry(classes)

        LOGGER.info("Discovered %d migrations in %d files", len(versions), len(included_files))
        return versions

    def load_migration_classes(
        self, files: list[Path], namespace: str | None
    ) -> list[MigrationUnit]:
        """
        Find the migration classes declared in the given loaded files.

        Args:
            files: Canonical paths of the files that were loaded
            namespace: If not None only classes in this namespace are returned

        Returns:
            Migration units in declaration order
        """
        included = set(files)
        classes = []
        for unit in self.loader.units_for(dict.fromkeys(files)):
            if unit.file not in included:
                continue

            if namespace is not None and not self._is_class_in_namespace(unit, namespace):
                continue

            assert issubclass(unit.migration_class, AbstractMigration), (
                f"{unit.name} in {unit.file} does not extend AbstractMigration"
            )
            classes.append(unit)

        return classes

    @staticmethod
    def _is_class_in_namespace(unit: MigrationUnit, namespace: str) -> bool:
        return unit.name.startswith(namespace + ".")
