"""Single-connection management with SQLAlchemy."""

import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any, Optional, Union

from sqlalchemy import Connection, Engine, create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from corkscrew.exceptions import ConfigurationError, ConnectionError
from corkscrew.models.config import DatabaseConfig
from corkscrew.models.result import ErrorState
from corkscrew.utils import dumps

logger = logging.getLogger(__name__)


def load_config(config: Union[DatabaseConfig, Mapping[str, Any]]) -> DatabaseConfig:
    """
    Coerce a mapping into a validated configuration.

    Args:
        config: Configuration model or mapping with the same keys

    Returns:
        Validated configuration

    Raises:
        ConfigurationError: If a required field is missing or invalid
    """
    if isinstance(config, DatabaseConfig):
        return config
    return DatabaseConfig.from_mapping(config)


class DatabaseConnection:
    """Owns the one live connection and translates backend errors."""

    def __init__(self, config: Union[DatabaseConfig, Mapping[str, Any]]):
        """
        Initialize database connection.

        Args:
            config: Connection settings (model or mapping)

        Raises:
            ConfigurationError: If driver, db_name or host is missing
        """
        self.config = load_config(config)
        self.engine: Optional[Engine] = None
        self._conn: Optional[Connection] = None
        self._last_error = ErrorState()

    @classmethod
    def open(
        cls, config: Union[DatabaseConfig, Mapping[str, Any]]
    ) -> "DatabaseConnection":
        """Validate the settings and open the connection."""
        connection = cls(config)
        connection.connect()
        return connection

    def connect(self) -> None:
        """
        Create the engine and check out its only connection.

        Raises:
            ConnectionError: If the driver cannot be loaded or the open fails
        """
        if self._conn is not None:
            return  # Already open; the handle is never re-created

        try:
            with self.guard("connect"):
                self.engine = create_engine(
                    self.config.url,
                    poolclass=StaticPool,
                    connect_args=dict(self.config.option),
                    echo=self.config.echo_sql,
                )
                self._conn = self.engine.connect()
        except ImportError as e:
            # DB-API module for the driver is not installed
            logger.warning(f"Cannot load driver {self.config.driver}: {e}")
            raise ConnectionError() from None

        logger.info(f"Opened {self.config.dialect} connection to {self.config.dsn}")

    def close(self) -> None:
        """Release the connection and dispose of the engine. Safe to call twice."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
        if self.engine is not None:
            self.engine.dispose()
            self.engine = None
            logger.info(f"Closed connection to {self.config.dsn}")

    @property
    def connection(self) -> Connection:
        """
        The live SQLAlchemy connection.

        Raises:
            ConnectionError: If the connection is not open
        """
        if self._conn is None:
            raise ConnectionError()
        return self._conn

    @property
    def is_open(self) -> bool:
        """Check if the connection is open."""
        return self._conn is not None and not self._conn.closed

    @property
    def dialect(self) -> str:
        """Get database dialect name."""
        return self.config.dialect

    @contextmanager
    def guard(
        self,
        action: str,
        sql: Optional[str] = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Iterator[None]:
        """
        Run a backend call, replacing any SQLAlchemy error with ConnectionError.

        The driver's diagnostics are kept as the last-error state and written
        to the log; the raised error only says "Database Error".

        Args:
            action: Short name of the backend call, for the log
            sql: SQL text involved, if any
            params: Bound values involved, if any

        Raises:
            ConnectionError: If the wrapped block raises a SQLAlchemy error
        """
        self._last_error = ErrorState()
        try:
            yield
        except SQLAlchemyError as e:
            self._last_error = ErrorState.from_exception(e)
            diagnostics = {
                "action": action,
                "sql": sql,
                "params": dict(params) if params else None,
                "sqlstate": self._last_error.sqlstate,
                "driver_code": self._last_error.driver_code,
                "message": self._last_error.message,
            }
            logger.warning(f"Backend call failed: {dumps(diagnostics)}")
            raise ConnectionError() from None

    def attribute(self, key: str) -> Any:
        """
        Get a backend configuration value.

        Args:
            key: One of driver_name, driver, server_version, client_version,
                isolation_level, in_transaction, dsn, or any key
                passed in the config ``option`` mapping

        Returns:
            The attribute value

        Raises:
            ConfigurationError: If the key is unknown
        """
        conn = self.connection
        dialect = conn.dialect

        if key == "driver_name":
            return dialect.name
        if key == "driver":
            return dialect.driver
        if key == "server_version":
            info = dialect.server_version_info
            return ".".join(str(part) for part in info) if info else None
        if key == "client_version":
            return getattr(dialect.dbapi, "__version__", None) or getattr(
                dialect.dbapi, "sqlite_version", None
            )
        if key == "isolation_level":
            with self.guard("get_isolation_level"):
                return conn.get_isolation_level()
        if key == "in_transaction":
            return conn.in_transaction()
        if key == "dsn":
            return self.config.dsn
        if key in self.config.option:
            return self.config.option[key]

        raise ConfigurationError(f"Unknown connection attribute: {key}")

    def error_code(self) -> str:
        """SQLSTATE of the last backend call ("00000" if it succeeded)."""
        return self._last_error.sqlstate

    def error_info(self) -> tuple[Any, ...]:
        """``(sqlstate, driver_code, message)`` of the last backend call."""
        return self._last_error.as_tuple()

    def __enter__(self) -> "DatabaseConnection":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
