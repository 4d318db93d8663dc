"""Database configuration model."""

import logging
import os
from collections.abc import Mapping
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator
from sqlalchemy.engine import URL

from corkscrew.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Query parameters that express "charset=utf8" in each dialect's own terms
CHARSET_QUERY = {
    "mysql": {"charset": "utf8"},
    "mariadb": {"charset": "utf8"},
    "postgresql": {"client_encoding": "utf8"},
}

# Dialects that address a file rather than a server
FILE_DIALECTS = {"sqlite"}

REQUIRED_FIELDS = ("driver", "db_name", "host")


class DatabaseConfig(BaseModel):
    """Settings required to open the single backend connection."""

    driver: str = Field(
        ...,
        description="SQLAlchemy driver name (e.g., mysql+pymysql, postgresql, sqlite)",
    )
    db_name: str = Field(..., description="Database name (file path for SQLite)")
    host: str = Field(..., description="Database host")
    port: Optional[int] = Field(default=None, ge=1, le=65535, description="Port")
    user: str = Field(default="", description="Login user")
    password: str = Field(default="", description="Login password")
    option: dict[str, Any] = Field(
        default_factory=dict,
        description="Backend-specific options passed to the DB-API connect()",
    )
    echo_sql: bool = Field(
        default=False,
        description="Echo SQL statements to the sqlalchemy.engine logger",
    )

    @field_validator("driver", "db_name", "host")
    @classmethod
    def require_value(cls, v: str) -> str:
        """Reject blank required fields."""
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("driver")
    @classmethod
    def validate_driver(cls, v: str) -> str:
        """Keep the driver usable as a DSN prefix."""
        if ":" in v or "/" in v:
            raise ValueError(f"Invalid driver name: {v}")
        return v.lower()

    @property
    def dialect(self) -> str:
        """Base dialect (e.g., "mysql" from "mysql+pymysql")."""
        return self.driver.split("+")[0]

    @property
    def dsn(self) -> str:
        """Connection string in ``driver:dbname=...;host=...;charset=utf8`` form."""
        return f"{self.driver}:dbname={self.db_name};host={self.host};charset=utf8"

    @property
    def url(self) -> URL:
        """SQLAlchemy URL equivalent to :attr:`dsn`."""
        if self.dialect in FILE_DIALECTS:
            # SQLite rejects host and credentials in its URL
            return URL.create(self.driver, database=self.db_name)

        return URL.create(
            self.driver,
            username=self.user or None,
            password=self.password or None,
            host=self.host,
            port=self.port,
            database=self.db_name,
            query=CHARSET_QUERY.get(self.dialect, {}),
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "DatabaseConfig":
        """
        Validate a plain mapping of settings.

        Args:
            data: Mapping with driver, db_name, host and optional fields

        Returns:
            Validated configuration

        Raises:
            ConfigurationError: If a required field is missing or invalid
        """
        missing = [field for field in REQUIRED_FIELDS if not data.get(field)]
        if missing:
            raise ConfigurationError(
                f"Missing required connection settings: {', '.join(missing)}"
            )

        try:
            return cls.model_validate(dict(data))
        except ValidationError as e:
            fields = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
            raise ConfigurationError(
                f"Invalid connection settings: {', '.join(fields) or 'unknown'}"
            ) from None

    @classmethod
    def from_env(cls, prefix: str = "CORKSCREW_DB_", **overrides: Any) -> "DatabaseConfig":
        """
        Build a configuration from environment variables.

        A ``.env`` file in the working directory is loaded first. Recognized
        variables (with the default prefix): ``CORKSCREW_DB_DRIVER``,
        ``CORKSCREW_DB_NAME``, ``CORKSCREW_DB_HOST``, ``CORKSCREW_DB_PORT``,
        ``CORKSCREW_DB_USER``, ``CORKSCREW_DB_PASSWORD`` and
        ``CORKSCREW_DB_ECHO``.

        Args:
            prefix: Environment variable prefix
            **overrides: Field values that take precedence over the environment

        Returns:
            Database configuration

        Raises:
            ConfigurationError: If a required variable is missing or invalid
        """
        load_dotenv()

        env_fields = {
            "driver": "DRIVER",
            "db_name": "NAME",
            "host": "HOST",
            "port": "PORT",
            "user": "USER",
            "password": "PASSWORD",
            "echo_sql": "ECHO",
        }
        values: dict[str, Any] = {}
        for field, suffix in env_fields.items():
            value = os.getenv(f"{prefix}{suffix}")
            if value is not None:
                values[field] = value

        values.update(overrides)
        logger.debug(f"Loaded database settings from environment: {sorted(values)}")
        return cls.from_mapping(values)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "driver": "mysql+pymysql",
                    "db_name": "app",
                    "host": "localhost",
                    "user": "app",
                    "password": "secret",
                    "option": {"connect_timeout": 5},
                }
            ]
        }
    }
