"""
Configuration management utilities.

This module provides environment variable handling with type conversion,
database URL validation, logging configuration and the settings object
consumed by the repositories.
"""

import logging
import logging.config
import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union
from urllib.parse import parse_qs, urlparse


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""

    pass


class LogLevel(Enum):
    """Enumeration for log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class EnvironmentConfig:
    """Utility class for handling environment variables with type conversion."""

    @staticmethod
    def get_str(
        key: str, default: Optional[str] = None, required: bool = False
    ) -> Optional[str]:
        """
        Get a string environment variable.

        Args:
            key: Environment variable key
            default: Default value if not found
            required: Whether the variable is required

        Returns:
            String value or default

        Raises:
            ConfigError: If required variable is missing
        """
        value = os.getenv(key, default)

        if required and value is None:
            raise ConfigError(f"Required environment variable '{key}' is not set")

        return value

    @staticmethod
    def get_int(
        key: str, default: Optional[int] = None, required: bool = False
    ) -> Optional[int]:
        """
        Get an integer environment variable.

        Raises:
            ConfigError: If required variable is missing or invalid
        """
        value = os.getenv(key)

        if value is None:
            if required:
                raise ConfigError(f"Required environment variable '{key}' is not set")
            return default

        try:
            return int(value)
        except ValueError:
            raise ConfigError(
                f"Environment variable '{key}' must be an integer, got: {value}"
            )

    @staticmethod
    def get_bool(
        key: str, default: Optional[bool] = None, required: bool = False
    ) -> Optional[bool]:
        """Get a boolean environment variable."""
        value = os.getenv(key)

        if value is None:
            if required:
                raise ConfigError(f"Required environment variable '{key}' is not set")
            return default

        return value.lower() in ("true", "1", "yes", "on", "enabled")


class DatabaseURLValidator:
    """Utility class for validating database URLs."""

    SUPPORTED_DRIVERS = {
        "postgresql": ["postgresql", "postgresql+asyncpg"],
        "sqlite": ["sqlite", "sqlite+aiosqlite"],
    }

    @classmethod
    def validate_url(cls, url: str) -> Dict[str, Any]:
        """
        Validate a database URL and return parsed components.

        Args:
            url: Database URL to validate

        Returns:
            Dictionary with validation results and parsed components

        Raises:
            ConfigError: If URL is invalid
        """
        if not url:
            raise ConfigError("Database URL cannot be empty")

        parsed = urlparse(url)

        if not parsed.scheme:
            raise ConfigError(
                "Database URL must include a scheme (e.g., postgresql://)"
            )

        backend = None
        for db_type, drivers in cls.SUPPORTED_DRIVERS.items():
            if parsed.scheme in drivers:
                backend = db_type
                break

        if backend is None:
            supported_list = []
            for drivers in cls.SUPPORTED_DRIVERS.values():
                supported_list.extend(drivers)
            raise ConfigError(
                f"Unsupported database driver '{parsed.scheme}'. Supported: {', '.join(supported_list)}"
            )

        if backend == "postgresql":
            if not parsed.hostname:
                raise ConfigError("Database URL must include a hostname")
            if not parsed.path.lstrip("/"):
                raise ConfigError("Database URL must include a database name")

        return {
            "valid": True,
            "backend": backend,
            "scheme": parsed.scheme,
            "hostname": parsed.hostname,
            "port": parsed.port,
            "database": parsed.path.lstrip("/") if parsed.path else "",
            "query": dict(parse_qs(parsed.query)),
        }


class LoggingConfigurator:
    """Utility class for configuring logging."""

    DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @staticmethod
    def configure_basic_logging(
        level: Union[str, LogLevel] = LogLevel.INFO,
        format_string: Optional[str] = None,
        log_file: Optional[str] = None,
    ) -> None:
        """
        Configure basic logging for the application.

        Args:
            level: Logging level
            format_string: Custom format string
            log_file: Optional log file path
        """
        if isinstance(level, LogLevel):
            level = level.value

        basic_config_args: Dict[str, Any] = {
            "level": level,
            "format": format_string or LoggingConfigurator.DEFAULT_FORMAT,
            "datefmt": "%Y-%m-%d %H:%M:%S",
        }
        if log_file:
            basic_config_args["filename"] = log_file
            basic_config_args["filemode"] = "a"

        logging.basicConfig(**basic_config_args)

    @staticmethod
    def configure_structured_logging(
        config_dict: Optional[Dict[str, Any]] = None,
        level: Union[str, LogLevel] = LogLevel.INFO,
    ) -> None:
        """
        Configure logging using a dictionary.

        Args:
            config_dict: Logging configuration dictionary
            level: Level for the petclinic_core logger when no dictionary is given
        """
        if config_dict:
            logging.config.dictConfig(config_dict)
            return

        if isinstance(level, LogLevel):
            level = level.value

        default_config = {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {"format": LoggingConfigurator.DEFAULT_FORMAT},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": level,
                    "formatter": "standard",
                    "stream": "ext://sys.stdout",
                }
            },
            "loggers": {
                "petclinic_core": {
                    "level": level,
                    "handlers": ["console"],
                    "propagate": False,
                }
            },
            "root": {"level": "WARNING", "handlers": ["console"]},
        }
        logging.config.dictConfig(default_config)


NESTED_FETCH_STRATEGIES = ("correlated", "batched")


@dataclass
class ClinicSettings:
    """Runtime settings for the clinic data access layer."""

    database_url: str
    echo_sql: bool = False
    default_page_size: int = 5
    nested_fetch_strategy: str = "correlated"
    log_level: LogLevel = LogLevel.INFO

    def __post_init__(self) -> None:
        DatabaseURLValidator.validate_url(self.database_url)
        if self.default_page_size <= 0:
            raise ConfigError(
                f"Default page size must be positive, got: {self.default_page_size}"
            )
        if self.nested_fetch_strategy not in NESTED_FETCH_STRATEGIES:
            raise ConfigError(
                f"Unknown nested fetch strategy '{self.nested_fetch_strategy}'. "
                f"Supported: {', '.join(NESTED_FETCH_STRATEGIES)}"
            )

    def configure_logging(self, format_string: Optional[str] = None) -> None:
        """Configure basic logging at ``log_level``."""
        LoggingConfigurator.configure_basic_logging(self.log_level, format_string)

    @classmethod
    def from_environment(cls) -> "ClinicSettings":
        """
        Create settings from PETCLINIC_* environment variables.

        Raises:
            ConfigError: If a variable is missing or invalid
        """
        level_name = EnvironmentConfig.get_str("PETCLINIC_LOG_LEVEL", "INFO")
        try:
            log_level = LogLevel(level_name.upper())
        except ValueError:
            raise ConfigError(f"Invalid log level: {level_name}")

        return cls(
            database_url=EnvironmentConfig.get_str(
                "PETCLINIC_DATABASE_URL", required=True
            ),
            echo_sql=EnvironmentConfig.get_bool("PETCLINIC_DB_ECHO", False),
            default_page_size=EnvironmentConfig.get_int(
                "PETCLINIC_DEFAULT_PAGE_SIZE", 5
            ),
            nested_fetch_strategy=EnvironmentConfig.get_str(
                "PETCLINIC_NESTED_FETCH_STRATEGY", "correlated"
            ),
            log_level=log_level,
        )
