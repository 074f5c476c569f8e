"""
Core infrastructure modules for the database bootstrap.

Provides common utilities used across the package:
- exceptions: Standardized exception hierarchy
"""

from dbinit.core.exceptions import (
    DbInitError,
    RetryableError,
    PermanentError,
    ConfigurationError,
    DatabaseConnectionError,
    DatabaseNotReadyError,
    StatementExecutionError,
    InvalidEventError,
    BootstrapFailedError,
)

__all__ = [
    "DbInitError",
    "RetryableError",
    "PermanentError",
    "ConfigurationError",
    "DatabaseConnectionError",
    "DatabaseNotReadyError",
    "StatementExecutionError",
    "InvalidEventError",
    "BootstrapFailedError",
]
