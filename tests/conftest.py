"""Pytest configuration and shared fixtures for corkscrew tests"""

import os
from typing import Iterator

import pytest
from dotenv import load_dotenv
from sqlalchemy import text

from corkscrew import Corkscrew, DatabaseConfig
from corkscrew.core import DatabaseConnection, StatementExecutor, StatementRegistry

# Load environment variables
load_dotenv()


# ==================== Configuration Fixtures ====================


@pytest.fixture
def sqlite_config() -> DatabaseConfig:
    """In-memory SQLite configuration"""
    return DatabaseConfig(driver="sqlite", db_name=":memory:", host="localhost")


@pytest.fixture
def config_dict() -> dict:
    """Raw configuration mapping as a caller would pass it"""
    return {
        "driver": "sqlite",
        "db_name": ":memory:",
        "host": "localhost",
        "user": "",
        "password": "",
        "option": {},
    }


def _env_config(prefix: str) -> DatabaseConfig:
    if not os.getenv(f"{prefix}HOST"):
        pytest.skip(f"{prefix}HOST not set in environment")
    return DatabaseConfig.from_env(prefix=prefix)


@pytest.fixture
def mysql_config() -> DatabaseConfig:
    """MySQL configuration from MYSQL_TEST_DB_* environment variables"""
    return _env_config("MYSQL_TEST_DB_")


@pytest.fixture
def pg_config() -> DatabaseConfig:
    """PostgreSQL configuration from PG_TEST_DB_* environment variables"""
    return _env_config("PG_TEST_DB_")


# ==================== Component Fixtures ====================


@pytest.fixture
def connection(sqlite_config: DatabaseConfig) -> Iterator[DatabaseConnection]:
    """Open in-memory connection with proper cleanup"""
    conn = DatabaseConnection.open(sqlite_config)
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture
def registry(connection: DatabaseConnection) -> StatementRegistry:
    """Statement registry on the in-memory connection"""
    return StatementRegistry(connection)


@pytest.fixture
def executor(
    connection: DatabaseConnection, registry: StatementRegistry
) -> StatementExecutor:
    """Statement executor on the in-memory connection"""
    return StatementExecutor(connection, registry)


@pytest.fixture
def users_table(connection: DatabaseConnection) -> DatabaseConnection:
    """Create a users table with a unique name column"""
    conn = connection.connection
    conn.execute(
        text(
            "CREATE TABLE users ("
            "id INTEGER PRIMARY KEY AUTOINCREMENT, "
            "name TEXT NOT NULL UNIQUE, "
            "age INTEGER)"
        )
    )
    conn.commit()
    return connection


@pytest.fixture
def db(sqlite_config: DatabaseConfig) -> Iterator[Corkscrew]:
    """Facade on an in-memory database holding a small users table"""
    with Corkscrew(sqlite_config) as facade:
        facade.prepare_statement(
            "create",
            "CREATE TABLE users ("
            "id INTEGER PRIMARY KEY AUTOINCREMENT, "
            "name TEXT NOT NULL UNIQUE, "
            "age INTEGER)",
        ).exec("create")
        facade.insert("INSERT INTO users (name, age) VALUES ('alice', 30)")
        facade.insert("INSERT INTO users (name, age) VALUES ('bob', 25)")
        yield facade


# ==================== Pytest Configuration ====================


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "postgresql: PostgreSQL-specific tests")
    config.addinivalue_line("markers", "mysql: MySQL-specific tests")
    config.addinivalue_line(
        "markers", "integration: Integration tests requiring database"
    )
