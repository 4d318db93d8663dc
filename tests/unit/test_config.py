"""Unit Tests for DatabaseConfig and configuration loading"""

import pytest
from sqlalchemy.engine import make_url

from corkscrew.core.connection import load_config
from corkscrew.exceptions import ConfigurationError
from corkscrew.models.config import DatabaseConfig


class TestDsn:
    """Test DSN and URL construction."""

    def test_dsn_format(self):
        """Test the driver:dbname=...;host=...;charset=utf8 form."""
        config = DatabaseConfig(driver="mysql", db_name="app", host="db.local")
        assert config.dsn == "mysql:dbname=app;host=db.local;charset=utf8"

    def test_mysql_url_carries_credentials_and_charset(self):
        """Test that MySQL URLs get credentials, host and charset."""
        config = DatabaseConfig(
            driver="mysql+pymysql",
            db_name="app",
            host="db.local",
            port=3306,
            user="app",
            password="secret",
        )
        url = config.url

        assert url.drivername == "mysql+pymysql"
        assert url.username == "app"
        assert url.password == "secret"
        assert url.host == "db.local"
        assert url.port == 3306
        assert url.database == "app"
        assert url.query["charset"] == "utf8"
        assert config.dialect == "mysql"

    def test_postgresql_url_uses_client_encoding(self):
        """Test that PostgreSQL expresses utf8 as client_encoding."""
        config = DatabaseConfig(driver="postgresql", db_name="app", host="pg")
        assert config.url.query == {"client_encoding": "utf8"}
        assert config.url.username is None

    def test_sqlite_url_has_no_host(self):
        """Test that SQLite URLs only carry the database path."""
        config = DatabaseConfig(
            driver="sqlite", db_name="/tmp/app.db", host="localhost", user="ignored"
        )
        url = make_url(config.url)

        assert url.host is None
        assert url.username is None
        assert url.database == "/tmp/app.db"

    def test_driver_is_normalized(self):
        """Test driver names are stripped and lower-cased."""
        config = DatabaseConfig(driver=" MySQL ", db_name="app", host="h")
        assert config.driver == "mysql"


class TestRequiredFields:
    """Test that missing required fields raise ConfigurationError."""

    @pytest.mark.parametrize("missing", ["driver", "db_name", "host"])
    def test_missing_field(self, config_dict: dict, missing: str):
        """Test each required field on its own."""
        del config_dict[missing]

        with pytest.raises(ConfigurationError, match=missing):
            load_config(config_dict)

    @pytest.mark.parametrize("missing", ["driver", "db_name", "host"])
    def test_blank_field(self, config_dict: dict, missing: str):
        """Test that blank values count as missing."""
        config_dict[missing] = ""

        with pytest.raises(ConfigurationError):
            load_config(config_dict)

    def test_invalid_field_reports_name(self, config_dict: dict):
        """Test that validation errors name the bad field."""
        config_dict["port"] = "not-a-port"

        with pytest.raises(ConfigurationError, match="port"):
            load_config(config_dict)

    def test_invalid_driver(self, config_dict: dict):
        """Test that a driver containing URL syntax is rejected."""
        config_dict["driver"] = "sqlite://"

        with pytest.raises(ConfigurationError, match="driver"):
            load_config(config_dict)

    def test_model_passes_through(self, sqlite_config: DatabaseConfig):
        """Test that a model is used as-is."""
        assert load_config(sqlite_config) is sqlite_config


class TestFromEnv:
    """Test loading settings from the environment."""

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch):
        """Test that prefixed variables populate the model."""
        monkeypatch.setenv("CKTEST_DRIVER", "postgresql")
        monkeypatch.setenv("CKTEST_NAME", "reports")
        monkeypatch.setenv("CKTEST_HOST", "pg.internal")
        monkeypatch.setenv("CKTEST_PORT", "5433")
        monkeypatch.setenv("CKTEST_USER", "reader")
        monkeypatch.setenv("CKTEST_ECHO", "true")

        config = DatabaseConfig.from_env(prefix="CKTEST_")

        assert config.driver == "postgresql"
        assert config.db_name == "reports"
        assert config.host == "pg.internal"
        assert config.port == 5433
        assert config.user == "reader"
        assert config.password == ""
        assert config.echo_sql is True

    def test_overrides_win(self, monkeypatch: pytest.MonkeyPatch):
        """Test that keyword overrides take precedence."""
        monkeypatch.setenv("CKTEST_DRIVER", "postgresql")
        monkeypatch.setenv("CKTEST_NAME", "reports")
        monkeypatch.setenv("CKTEST_HOST", "pg.internal")

        config = DatabaseConfig.from_env(prefix="CKTEST_", host="localhost")
        assert config.host == "localhost"

    def test_missing_variable_is_configuration_error(
        self, monkeypatch: pytest.MonkeyPatch
    ):
        """Test that an incomplete environment raises ConfigurationError."""
        monkeypatch.setenv("CKTEST_DRIVER", "postgresql")
        monkeypatch.delenv("CKTEST_HOST", raising=False)
        monkeypatch.delenv("CKTEST_NAME", raising=False)

        with pytest.raises(ConfigurationError, match="db_name, host"):
            DatabaseConfig.from_env(prefix="CKTEST_")
