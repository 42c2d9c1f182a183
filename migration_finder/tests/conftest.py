"""
Shared fixtures for migration finder tests
"""

import logging
import textwrap
from pathlib import Path

import pytest

from migration_finder.loader import module_name_for

MIGRATION_TEMPLATE = '''
from migration_finder import AbstractMigration


class {class_name}(AbstractMigration):
    description = "{class_name} test migration"

    def up(self, conn):
        conn.execute("SELECT 1")
'''


def _write_migration(directory: Path, class_name: str, file_stem: str | None = None) -> Path:
    """Write a file defining a single migration class."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{file_stem or class_name}.py"
    path.write_text(MIGRATION_TEMPLATE.format(class_name=class_name), encoding="utf-8")
    return path


def _write_source(directory: Path, file_name: str, source: str) -> Path:
    """Write arbitrary Python source to a file."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / file_name
    path.write_text(textwrap.dedent(source), encoding="utf-8")
    return path


def _make_package(directory: Path) -> Path:
    """Turn a directory into a Python package."""
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "__init__.py").touch()
    return directory


@pytest.fixture
def migrations_dir(tmp_path):
    """Empty directory to hold migration files."""
    path = tmp_path / "migrations"
    path.mkdir()
    return path


@pytest.fixture
def isolated_logger(request):
    """Fresh logger for logging setup tests, cleaned up afterwards."""
    logger = logging.getLogger(f"migration_finder.tests.{request.node.name}")
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.handlers = []
    logger.setLevel(logging.NOTSET)
    if hasattr(logger, "_migration_finder_logging_configured"):
        delattr(logger, "_migration_finder_logging_configured")


@pytest.fixture
def write_migration():
    return _write_migration


@pytest.fixture
def write_source():
    return _write_source


@pytest.fixture
def make_package():
    return _make_package


@pytest.fixture
def qualified_name():
    """Build the fully-qualified name of a class loaded from a file."""

    def _qualified_name(directory: Path, class_name: str, file_stem: str | None = None) -> str:
        path = (directory / f"{file_stem or class_name}.py").resolve()
        return f"{module_name_for(path)}.{class_name}"

    return _qualified_name


@pytest.fixture
def package_log_level():
    """Restore the package logger level changed by discovery."""
    logger = logging.getLogger("migration_finder")
    level = logger.level
    yield logger
    logger.setLevel(level)
