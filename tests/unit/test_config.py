"""Unit tests for configuration, logging and driver discovery."""

import logging

import pytest
from pydantic import ValidationError as PydanticValidationError

from tablewriter.core import logging as log_module
from tablewriter.core.config import (
    LoggingConfig,
    Settings,
    TableInitializationConfig,
)
from tablewriter.core.exceptions import ConfigurationError
from tablewriter.data.models import AuthType
from tablewriter.utils import odbc_driver


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Remove database settings from the environment."""
    for name in (
        "DB_TYPE",
        "DB_SERVER",
        "DB_PORT",
        "DB_DATABASE",
        "DB_SCHEMA",
        "DB_USERNAME",
        "DB_PASSWORD",
        "DB_USE_WINDOWS_AUTH",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestTableInitializationConfig:
    """Tests for TableInitializationConfig."""

    def test_defaults(self):
        """Every step is disabled by default."""
        options = TableInitializationConfig()
        assert options.create_table_dynamically is False
        assert options.update_db_table_to_match_schema is False
        assert options.update_schema_to_match_db_table is False
        assert options.update_indexes is False
        assert options.indexes_to_generate == {}

    def test_frozen(self):
        """Options cannot be changed after creation."""
        options = TableInitializationConfig()
        with pytest.raises(PydanticValidationError):
            options.update_indexes = True

    def test_blank_index_column(self):
        """Blank index column names are rejected."""
        with pytest.raises(PydanticValidationError):
            TableInitializationConfig(indexes_to_generate={" ": True})

    def test_both_directions_warn(self, caplog):
        """Enabling both directions logs a warning."""
        with caplog.at_level(logging.WARNING, logger="tablewriter.core.config"):
            TableInitializationConfig(
                update_db_table_to_match_schema=True,
                update_schema_to_match_db_table=True,
            )

        assert "Both 'update_db_table_to_match_schema' and" in caplog.text

    def test_single_direction_silent(self, caplog):
        """One direction alone does not warn."""
        with caplog.at_level(logging.WARNING, logger="tablewriter.core.config"):
            TableInitializationConfig(update_db_table_to_match_schema=True)

        assert caplog.text == ""

    def test_from_environment(self, monkeypatch):
        """Flags can come from environment variables."""
        monkeypatch.setenv("TABLE_INIT_UPDATE_INDEXES", "true")
        monkeypatch.setenv("TABLE_INIT_INDEXES_TO_GENERATE", '{"age": true}')

        options = TableInitializationConfig()

        assert options.update_indexes is True
        assert options.indexes_to_generate == {"age": True}


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self, clean_env):
        """Test default settings."""
        settings = Settings()
        assert settings.db_type == "sqlite"
        assert settings.logging.level == "INFO"
        assert settings.logging.file_enabled is False
        assert settings.table_initialization.update_indexes is False

    def test_invalid_db_type(self, clean_env):
        """Unsupported database types are rejected."""
        with pytest.raises(PydanticValidationError):
            Settings(db_type="oracle")

    def test_db_type_normalized(self, clean_env):
        """Database types are case-insensitive."""
        assert Settings(db_type="PostgreSQL").db_type == "postgresql"

    def test_invalid_log_level(self):
        """Unknown log levels are rejected."""
        with pytest.raises(PydanticValidationError):
            LoggingConfig(level="verbose")

    def test_yaml_config(self, clean_env):
        """Sections of the YAML file override defaults."""
        config_file = clean_env / "config.yaml"
        config_file.write_text(
            "database:\n"
            "  pool_size: 2\n"
            "logging:\n"
            "  level: debug\n"
            "  file:\n"
            "    enabled: true\n"
            "    path: logs/test.log\n"
            "  console:\n"
            "    enabled: false\n"
            "table_initialization:\n"
            "  create_table_dynamically: true\n"
            "  update_indexes: true\n"
            "  indexes_to_generate:\n"
            "    age: false\n"
            "    name: true\n",
            encoding="utf-8",
        )

        settings = Settings(config_file=str(config_file))

        assert settings.database.pool_size == 2
        assert settings.logging.level == "DEBUG"
        assert settings.logging.file_enabled is True
        assert settings.logging.file_path == "logs/test.log"
        assert settings.logging.console_enabled is False
        options = settings.table_initialization
        assert options.create_table_dynamically is True
        assert options.indexes_to_generate == {"age": False, "name": True}

    def test_missing_yaml_ignored(self, clean_env):
        """A missing config file leaves defaults in place."""
        settings = Settings(config_file=str(clean_env / "absent.yaml"))
        assert settings.database.pool_size == 5

    def test_invalid_yaml(self, clean_env):
        """Bad YAML content raises ConfigurationError."""
        config_file = clean_env / "config.yaml"
        config_file.write_text("database:\n  pool_size: 100\n", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="Failed to load configuration"):
            Settings(config_file=str(config_file))


class TestGetConnectionInfo:
    """Tests for Settings.get_connection_info."""

    def test_database_required(self, clean_env):
        """A database name is required."""
        with pytest.raises(ConfigurationError, match="Database name is required"):
            Settings().get_connection_info()

    def test_credentials_required(self, clean_env):
        """SQL authentication needs a username and password."""
        settings = Settings(db_type="postgresql", db_database="app", db_username="u")
        with pytest.raises(ConfigurationError, match="Username and password"):
            settings.get_connection_info()

    def test_windows_auth(self, clean_env):
        """Windows authentication needs no credentials."""
        info = Settings(
            db_type="sqlserver",
            db_database="app",
            db_use_windows_auth=True,
        ).get_connection_info()

        assert info.auth_type == AuthType.WINDOWS
        assert info.username is None

    def test_sqlite(self, clean_env):
        """SQLite only needs a database path."""
        info = Settings(db_database="data.db").get_connection_info()
        assert info.database == "data.db"
        assert info.connection_timeout == 30

    def test_from_environment(self, clean_env, monkeypatch):
        """Connection settings come from environment variables."""
        monkeypatch.setenv("DB_TYPE", "mysql")
        monkeypatch.setenv("DB_SERVER", "db.local")
        monkeypatch.setenv("DB_PORT", "3306")
        monkeypatch.setenv("DB_DATABASE", "app")
        monkeypatch.setenv("DB_USERNAME", "user")
        monkeypatch.setenv("DB_PASSWORD", "secret")

        info = Settings().get_connection_info()

        assert info.get_display_name() == "db.local:3306/app"
        assert info.auth_type == AuthType.SQL


class _ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.messages = []

    def emit(self, record):
        self.messages.append(record.getMessage())


@pytest.fixture
def use_logging_config(tmp_path, monkeypatch):
    """Point setup_logging at the given logging settings."""

    def _use(**values):
        settings = Settings(
            config_file=str(tmp_path / "absent.yaml"), logging=LoggingConfig(**values)
        )
        monkeypatch.setattr(log_module, "get_settings", lambda: settings)

    return _use


@pytest.fixture
def root_handler():
    """Attach a collecting handler to the root logger."""
    handler = _ListHandler()
    logging.getLogger().addHandler(handler)
    yield handler
    logging.getLogger().removeHandler(handler)


def _drop_handlers(logger):
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


class TestSetupLogging:
    """Tests for logger setup."""

    def test_propagating_logger_emits_once(self, use_logging_config, root_handler, capsys):
        """With an application root handler, each record is written once."""
        use_logging_config(console_enabled=True, propagate=True)

        logger = log_module.setup_logging("tablewriter.tests.propagating")
        logger.error("table 'users' does not exist")

        assert logger.handlers == []
        assert root_handler.messages == ["table 'users' does not exist"]
        assert capsys.readouterr().err == ""

    def test_isolated_logger_writes_to_console(self, use_logging_config, capsys):
        """Without propagation the logger writes to stderr itself."""
        use_logging_config(console_enabled=True, propagate=False, format="%(message)s")

        logger = log_module.setup_logging("tablewriter.tests.isolated")
        logger.warning("only here")

        assert logger.propagate is False
        assert capsys.readouterr().err.splitlines() == ["only here"]
        _drop_handlers(logger)

    def test_configured_once(self, use_logging_config):
        """Repeated setup returns the same logger without new handlers."""
        use_logging_config(propagate=False)

        logger = log_module.setup_logging("tablewriter.tests.once", level="debug")
        again = log_module.setup_logging("tablewriter.tests.once", level="error")

        assert again is logger
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        _drop_handlers(logger)

    def test_file_handler(self, tmp_path, use_logging_config):
        """File logging writes to the configured path."""
        log_file = tmp_path / "logs" / "app.log"
        use_logging_config(file_enabled=True, file_path=str(log_file))

        logger = log_module.setup_logging("tablewriter.tests.file")
        logger.info("written to file")
        for handler in logger.handlers:
            handler.flush()

        assert "written to file" in log_file.read_text(encoding="utf-8")
        _drop_handlers(logger)


class TestOdbcDriver:
    """Tests for SQL Server driver discovery."""

    def test_prefers_newest_known_driver(self):
        """Known drivers are picked in order of preference."""
        available = ["SQL Server", "ODBC Driver 17 for SQL Server", "FreeTDS"]
        assert odbc_driver.find_sql_server_driver(available) == (
            "ODBC Driver 17 for SQL Server"
        )

    def test_falls_back_to_any_sql_server_driver(self):
        """Unknown drivers mentioning SQL Server are accepted."""
        available = ["FreeTDS", "Vendor SQL Server Driver"]
        assert odbc_driver.find_sql_server_driver(available) == "Vendor SQL Server Driver"

    def test_no_driver(self):
        """None is returned when nothing matches."""
        assert odbc_driver.find_sql_server_driver(["FreeTDS"]) is None

    def test_environment_override(self, monkeypatch):
        """ODBC_DRIVER wins over detection."""
        monkeypatch.setenv("ODBC_DRIVER", "{My Driver}")
        assert odbc_driver.get_odbc_driver_string() == "{My Driver}"

    def test_default_driver(self, monkeypatch):
        """The newest Microsoft driver is assumed when none is found."""
        monkeypatch.delenv("ODBC_DRIVER", raising=False)
        monkeypatch.setattr(odbc_driver, "find_sql_server_driver", lambda: None)
        assert odbc_driver.get_odbc_driver_string() == (
            "{ODBC Driver 18 for SQL Server}"
        )
