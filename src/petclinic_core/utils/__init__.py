"""
Utility functions and helper modules.

This module provides configuration management and logging setup shared
by the rest of the package.
"""

from .config import (
    NESTED_FETCH_STRATEGIES,
    ClinicSettings,
    ConfigError,
    DatabaseURLValidator,
    EnvironmentConfig,
    LoggingConfigurator,
    LogLevel,
)

__all__ = [
    # Configuration utilities
    "ConfigError",
    "LogLevel",
    "EnvironmentConfig",
    "DatabaseURLValidator",
    "LoggingConfigurator",
    "ClinicSettings",
    "NESTED_FETCH_STRATEGIES",
]
