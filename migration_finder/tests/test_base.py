"""
Tests for the base migration contract.
"""

import sqlite3

import pytest

from migration_finder.base import AbstractMigration, IrreversibleMigration, MigrationError


class Version20240301120000(AbstractMigration):
    """Test migration for unit tests."""

    description = "Create a test table"

    def up(self, conn: sqlite3.Connection) -> None:
        conn.execute("CREATE TABLE test_table (id INTEGER PRIMARY KEY, name TEXT)")

    def down(self, conn: sqlite3.Connection) -> None:
        conn.execute("DROP TABLE IF EXISTS test_table")


class Version20240302000000(AbstractMigration):
    """Migration without rollback support."""

    def up(self, conn: sqlite3.Connection) -> None:
        pass


@pytest.fixture
def conn():
    connection = sqlite3.connect(":memory:")
    yield connection
    connection.close()


class TestAbstractMigration:
    """Test base migration functionality."""

    def test_version_from_class_name(self):
        assert Version20240301120000.version() == "20240301120000"

    def test_string_representation(self, conn):
        migration = Version20240301120000(conn)

        assert str(migration) == "Migration(20240301120000)"
        assert repr(migration) == "Version20240301120000(version='20240301120000')"

    def test_defaults(self, conn):
        """Test default description, logger and transactional flag."""
        migration = Version20240302000000(conn)

        assert migration.description == ""
        assert migration.is_transactional() is True
        assert migration.conn is conn
        assert migration.logger.name.endswith("Version20240302000000")

    def test_up_and_down(self, conn):
        migration = Version20240301120000(conn)

        migration.up(conn)
        conn.execute("INSERT INTO test_table (name) VALUES ('row')")
        migration.down(conn)

        tables = conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name='test_table'"
        ).fetchall()
        assert tables == []

    def test_down_not_supported_by_default(self, conn):
        migration = Version20240302000000(conn)

        with pytest.raises(IrreversibleMigration, match="does not support rollback"):
            migration.down(conn)

    def test_irreversible_is_migration_error(self):
        assert issubclass(IrreversibleMigration, MigrationError)

    def test_cannot_instantiate_without_up(self, conn):
        class VersionIncomplete(AbstractMigration):
            pass

        with pytest.raises(TypeError):
            VersionIncomplete(conn)
