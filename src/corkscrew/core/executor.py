"""Statement execution with transaction handling."""

import logging
import time
from typing import Any, Optional, Union

from sqlalchemy import text

from corkscrew.core.classifier import DELETE, INSERT, SELECT, UPDATE, QueryClassifier
from corkscrew.core.connection import DatabaseConnection
from corkscrew.core.registry import StatementRegistry
from corkscrew.exceptions import EmptyResultError
from corkscrew.models.result import WriteResult

logger = logging.getLogger(__name__)

Row = dict[str, Any]


class StatementExecutor:
    """
    Runs prepared statements and ad-hoc queries on the shared connection.

    Two transaction styles are used on purpose:

    - ``exec`` wraps the one statement in an explicit transaction
      ("begin once") and rolls back if it fails.
    - ``select``/``insert``/``update``/``delete`` run the query directly and
      commit it on its own ("commit as you go"), the same as a driver in
      autocommit mode.
    """

    def __init__(self, connection: DatabaseConnection, registry: StatementRegistry):
        """
        Initialize statement executor.

        Args:
            connection: Connection manager
            registry: Prepared statements to execute by name
        """
        self.connection = connection
        self.registry = registry

    def exec(self, name: str) -> Union[list[Row], WriteResult]:
        """
        Execute a prepared statement inside its own transaction.

        Args:
            name: Registry key of a prepared (and optionally bound) statement

        Returns:
            All rows as dicts if the SQL is a SELECT, otherwise a WriteResult

        Raises:
            StatementNameError: If name is empty
            NotFoundError: If nothing is registered under name
            ConnectionError: If execution fails (after rolling back)
            EmptyResultError: If a SELECT returned no rows
        """
        statement = self.registry.get(name)
        is_select = QueryClassifier.matches(statement.sql, SELECT)
        conn = self.connection.connection

        start_time = time.time()

        with self.connection.guard("exec", sql=statement.sql, params=statement.params):
            transaction = conn.begin()
            try:
                result = conn.execute(statement.clause)
                if is_select:
                    outcome: Union[list[Row], WriteResult] = [
                        dict(row) for row in result.mappings()
                    ]
                else:
                    outcome = WriteResult(
                        query=statement.sql,
                        row_count=result.rowcount,
                        last_row_id=result.lastrowid,
                    )

                if transaction.is_active:
                    transaction.commit()
            except Exception:
                logger.debug(f"Rolling back statement {name!r}")
                transaction.rollback()
                raise

        execution_time = (time.time() - start_time) * 1000  # Convert to ms
        logger.debug(f"Executed statement {name!r} in {execution_time:.2f} ms")

        if isinstance(outcome, WriteResult):
            outcome.execution_time_ms = execution_time
            return outcome

        if not outcome:
            raise EmptyResultError(name)
        return outcome

    def select(self, query: str) -> Optional[Row]:
        """Run a SELECT and return its first row, or None."""
        return self._run(query, SELECT, fetch_all=False)

    def insert(self, query: str) -> Optional[Row]:
        """Run an INSERT and return the first returned row (RETURNING), or None."""
        return self._run(query, INSERT, fetch_all=False)

    def update(self, query: str) -> Optional[Row]:
        """Run an UPDATE and return the first returned row (RETURNING), or None."""
        return self._run(query, UPDATE, fetch_all=False)

    def delete(self, query: str) -> list[Row]:
        """Run a DELETE and return all returned rows (RETURNING), or []."""
        return self._run(query, DELETE, fetch_all=True)

    def _run(self, query: str, kind: str, fetch_all: bool) -> Any:
        """
        Validate and run an ad-hoc query, committing it on its own.

        Raises:
            InvalidQueryError: If the query's verb is not ``kind``
            ConnectionError: If the backend rejects the query
        """
        QueryClassifier.validate(query, kind)
        conn = self.connection.connection

        with self.connection.guard(kind, sql=query):
            try:
                result = conn.execute(text(query))
                if not result.returns_rows:
                    rows: Any = [] if fetch_all else None
                elif fetch_all:
                    rows = [dict(row) for row in result.mappings()]
                else:
                    row = result.mappings().fetchone()
                    rows = dict(row) if row is not None else None
                    result.close()
                conn.commit()
            except Exception:
                # Clear the failed implicit transaction so the connection stays usable
                if conn.in_transaction():
                    conn.rollback()
                raise

        logger.debug(f"Ran {kind} query: {query}")
        return rows
