"""Configuration management."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from tablewriter.core.exceptions import ConfigurationError

# core.logging builds on these settings, so this module logs through stdlib directly
logger = logging.getLogger(__name__)

SUPPORTED_DB_TYPES = ["sqlserver", "postgresql", "mysql", "sqlite"]


class DatabaseConfig(BaseSettings):
    """SQLAlchemy engine settings."""

    model_config = SettingsConfigDict(env_prefix="DB_POOL_", extra="ignore")

    connection_timeout: int = Field(default=30, ge=1, le=300)
    pool_size: int = Field(default=5, ge=1, le=20)
    max_overflow: int = Field(default=10, ge=0, le=50)
    pool_recycle: int = Field(default=3600, ge=300)
    echo: bool = Field(default=False)


class LoggingConfig(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(env_prefix="LOG_", extra="ignore")

    level: str = Field(default="INFO")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    date_format: str = Field(default="%Y-%m-%d %H:%M:%S")
    file_enabled: bool = Field(default=False)
    file_path: str = Field(default="logs/tablewriter.log")
    file_max_bytes: int = Field(default=10485760)  # 10MB
    file_backup_count: int = Field(default=5)
    console_enabled: bool = Field(default=True)
    propagate: bool = Field(default=True)

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v_upper


class TableInitializationConfig(BaseSettings):
    """
    Selects which reconciliation steps run for a table.

    Attributes:
        create_table_dynamically: Create the table (and its indexes) if absent
        update_db_table_to_match_schema: Add schema columns missing on the table
        update_schema_to_match_db_table: Replace the schema with the table's
        update_indexes: Add, remove and re-cluster indexes
        indexes_to_generate: Column name -> whether its index is clustered
    """

    model_config = SettingsConfigDict(
        env_prefix="TABLE_INIT_", extra="ignore", frozen=True
    )

    create_table_dynamically: bool = Field(default=False)
    update_db_table_to_match_schema: bool = Field(default=False)
    update_schema_to_match_db_table: bool = Field(default=False)
    update_indexes: bool = Field(default=False)
    indexes_to_generate: dict[str, bool] = Field(default_factory=dict)

    @field_validator("indexes_to_generate")
    @classmethod
    def validate_index_columns(cls, v: dict[str, bool]) -> dict[str, bool]:
        """Reject blank column names."""
        for column_name in v:
            if not column_name or not column_name.strip():
                raise ValueError("Index column names cannot be empty")
        return v

    @model_validator(mode="after")
    def warn_on_conflicting_directions(self) -> "TableInitializationConfig":
        """Warn when both synchronization directions are enabled."""
        if self.update_db_table_to_match_schema and self.update_schema_to_match_db_table:
            logger.warning(
                "Both 'update_db_table_to_match_schema' and "
                "'update_schema_to_match_db_table' are enabled; columns are pushed "
                "to the table first, then the schema is replaced by the table's."
            )
        return self


class Settings(BaseSettings):
    """Main settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    app_name: str = Field(default="tablewriter", alias="APP_NAME")
    app_version: str = Field(default="1.0.0", alias="APP_VERSION")
    config_file: str = Field(default="config/config.yaml", alias="CONFIG_FILE")

    # Target database
    db_type: str = Field(default="sqlite", alias="DB_TYPE")
    db_server: str = Field(default="localhost", alias="DB_SERVER")
    db_port: Optional[int] = Field(default=None, alias="DB_PORT")
    db_database: str = Field(default="", alias="DB_DATABASE")
    db_schema: Optional[str] = Field(default=None, alias="DB_SCHEMA")
    db_username: Optional[str] = Field(default=None, alias="DB_USERNAME")
    db_password: Optional[str] = Field(default=None, alias="DB_PASSWORD")
    db_use_windows_auth: bool = Field(default=False, alias="DB_USE_WINDOWS_AUTH")

    # Sub-configurations
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    table_initialization: TableInitializationConfig = Field(
        default_factory=TableInitializationConfig
    )

    @field_validator("db_type")
    @classmethod
    def validate_db_type(cls, v: str) -> str:
        """Validate database type."""
        v_lower = v.lower()
        if v_lower not in SUPPORTED_DB_TYPES:
            raise ValueError(f"Database type must be one of {SUPPORTED_DB_TYPES}")
        return v_lower

    def __init__(self, **kwargs: Any) -> None:
        """Initialize settings and load from YAML if available."""
        super().__init__(**kwargs)
        self._load_yaml_config()

    def _load_yaml_config(self) -> None:
        """Load configuration from YAML file."""
        config_path = Path(self.config_file)
        if not config_path.exists():
            return

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f)

            if not yaml_config:
                return

            if "database" in yaml_config:
                self.database = DatabaseConfig(**yaml_config["database"])

            if "logging" in yaml_config:
                log_config = dict(yaml_config["logging"])
                # Flatten nested file and console configs
                if "file" in log_config:
                    file_config = log_config.pop("file")
                    log_config["file_enabled"] = file_config.get("enabled", False)
                    log_config["file_path"] = file_config.get(
                        "path", "logs/tablewriter.log"
                    )
                    log_config["file_max_bytes"] = file_config.get(
                        "max_bytes", 10485760
                    )
                    log_config["file_backup_count"] = file_config.get(
                        "backup_count", 5
                    )
                if "console" in log_config:
                    console_config = log_config.pop("console")
                    log_config["console_enabled"] = console_config.get("enabled", True)
                self.logging = LoggingConfig(**log_config)

            if "table_initialization" in yaml_config:
                self.table_initialization = TableInitializationConfig(
                    **yaml_config["table_initialization"]
                )

        except Exception as e:
            raise ConfigurationError(
                f"Failed to load configuration from {config_path}: {str(e)}",
                config_key="yaml_config",
            ) from e

    def get_connection_info(self) -> Any:
        """
        Build connection information for the target database.

        Returns:
            ConnectionInfo for the configured database

        Raises:
            ConfigurationError: If required connection parameters are missing
        """
        from tablewriter.data.models import AuthType, ConnectionInfo

        if not self.db_database:
            raise ConfigurationError(
                "Database name is required", config_key="db_database"
            )

        needs_credentials = self.db_type in ("postgresql", "mysql") or (
            self.db_type == "sqlserver" and not self.db_use_windows_auth
        )
        if needs_credentials and (not self.db_username or not self.db_password):
            raise ConfigurationError(
                "Username and password are required for SQL authentication",
                config_key="db_credentials",
            )

        return ConnectionInfo(
            server=self.db_server,
            database=self.db_database,
            username=self.db_username,
            password=self.db_password,
            auth_type=AuthType.WINDOWS if self.db_use_windows_auth else AuthType.SQL,
            port=self.db_port,
            schema_name=self.db_schema,
            connection_timeout=self.database.connection_timeout,
        )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings.

    Returns:
        Settings instance
    """
    return Settings()
