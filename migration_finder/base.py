"""
Base migration classes for migrations discovered by the finder.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import sqlite3

# Length of the conventional "Version" class name prefix
VERSION_PREFIX_LENGTH = 7


class MigrationError(Exception):
    """Exception raised during migration execution."""


class IrreversibleMigration(MigrationError):
    """Raised when a migration cannot be rolled back."""


class AbstractMigration(ABC):
    """
    Base class for all discoverable migrations.

    Migration classes are named ``Version<identifier>`` and live one per file
    in the migrations directory. Each migration must implement the `up` method
    and may implement `down` to support rollback.
    """

    description: str = ""

    def __init__(self, conn: sqlite3.Connection, logger: logging.Logger | None = None):
        """
        Initialize a migration.

        Args:
            conn: Database connection the migration will run against
            logger: Optional logger, defaults to one named after the class
        """
        self.conn = conn
        self.logger = logger or logging.getLogger(
            f"{type(self).__module__}.{type(self).__qualname__}"
        )

    @classmethod
    def version(cls) -> str:
        """Get the version identifier derived from the class name."""
        return cls.__name__[VERSION_PREFIX_LENGTH:]

    @abstractmethod
    def up(self, conn: sqlite3.Connection) -> None:
        """
        Apply the migration.

        Args:
            conn: Database connection to execute migration on

        Raises:
            MigrationError: If migration fails
        """

    def down(self, conn: sqlite3.Connection) -> None:
        """
        Rollback the migration (optional).

        Raises:
            IrreversibleMigration: Unless the subclass overrides this method
        """
        raise IrreversibleMigration(f"Migration {self.version()} does not support rollback")

    def is_transactional(self) -> bool:
        """Whether the runner should wrap this migration in a transaction."""
        return True

    def __str__(self) -> str:
        return f"Migration({self.version()})"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(version='{self.version()}')"
