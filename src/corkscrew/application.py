"""Database access facade."""

import logging
from collections.abc import Mapping
from typing import Any, Optional, Union

from corkscrew.core import (
    DatabaseConnection,
    QueryClassifier,
    StatementExecutor,
    StatementRegistry,
)
from corkscrew.models.config import DatabaseConfig
from corkscrew.models.result import WriteResult
from corkscrew.models.statement import NamedStatement

logger = logging.getLogger(__name__)


class Corkscrew:
    """
    One connection, a cache of named prepared statements, and helpers to run them.

    The connection is opened on construction. Statement setup chains::

        db = Corkscrew(config)
        rows = (
            db.prepare_statement("by_id", "SELECT * FROM users WHERE id = :id")
            .set_params("by_id", {"id": "42"})
            .exec("by_id")
        )

    Not thread-safe: use one instance per worker.
    """

    def __init__(self, config: Union[DatabaseConfig, Mapping[str, Any]]):
        """
        Open the connection.

        Args:
            config: Connection settings (model or mapping)

        Raises:
            ConfigurationError: If driver, db_name or host is missing
            ConnectionError: If the connection cannot be opened
        """
        self.connection = DatabaseConnection.open(config)
        self._registry = StatementRegistry(self.connection)
        self._executor = StatementExecutor(self.connection, self._registry)

    @classmethod
    def from_env(cls, prefix: str = "CORKSCREW_DB_", **overrides: Any) -> "Corkscrew":
        """Open a connection configured from environment variables (and .env)."""
        return cls(DatabaseConfig.from_env(prefix, **overrides))

    @property
    def config(self) -> DatabaseConfig:
        """Connection settings in use."""
        return self.connection.config

    # Prepared statements

    def prepare_statement(self, name: str, sql: str) -> "Corkscrew":
        """Compile ``sql`` under ``name``, replacing any statement of that name."""
        self._registry.prepare(name, sql)
        return self

    def get_statement(self, name: str) -> NamedStatement:
        """Return the statement registered under ``name``."""
        return self._registry.get(name)

    def set_params(self, name: str, params: Mapping[str, Any]) -> "Corkscrew":
        """Bind placeholder values on the statement registered under ``name``."""
        self._registry.bind(name, params)
        return self

    def has_statement(self, name: str) -> bool:
        """Check if a statement is registered under ``name``."""
        return name in self._registry

    def exec(self, name: str) -> Union[list[dict[str, Any]], WriteResult]:
        """Execute a prepared statement in its own transaction."""
        return self._executor.exec(name)

    # Ad-hoc queries, committed individually without an explicit transaction

    def select(self, query: str) -> Optional[dict[str, Any]]:
        """Run a SELECT and return its first row."""
        return self._executor.select(query)

    def insert(self, query: str) -> Optional[dict[str, Any]]:
        """Run an INSERT and return its first returned row."""
        return self._executor.insert(query)

    def update(self, query: str) -> Optional[dict[str, Any]]:
        """Run an UPDATE and return its first returned row."""
        return self._executor.update(query)

    def delete(self, query: str) -> list[dict[str, Any]]:
        """Run a DELETE and return all returned rows."""
        return self._executor.delete(query)

    @staticmethod
    def validate_query(query: str, kind: str) -> bool:
        """Require ``query`` to start with the ``kind`` verb."""
        return QueryClassifier.validate(query, kind)

    # Diagnostics

    def attribute(self, key: str) -> Any:
        """Get a backend configuration value."""
        return self.connection.attribute(key)

    def error_code(self) -> str:
        """SQLSTATE of the last backend call."""
        return self.connection.error_code()

    def error_info(self) -> tuple[Any, ...]:
        """``(sqlstate, driver_code, message)`` of the last backend call."""
        return self.connection.error_info()

    def close(self) -> None:
        """Close the connection."""
        self.connection.close()

    def __enter__(self) -> "Corkscrew":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
