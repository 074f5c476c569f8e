"""
Core exception hierarchy for the database bootstrap.

Provides standardized exception types with categorization for retry logic.
The bootstrap routine converts per-statement failures into recorded outcomes,
so these exceptions surface only from configuration, event parsing and the
readiness probe.
"""

from typing import Any, Optional


# =============================================================================
# Base Exceptions
# =============================================================================


class DbInitError(Exception):
    """Base exception for all bootstrap errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class RetryableError(DbInitError):
    """
    Transient errors that may succeed on a later attempt.

    Examples: database still starting, connect timeout, network blip.
    """

    pass


class PermanentError(DbInitError):
    """
    Errors that won't be fixed by retrying.

    Examples: invalid configuration, malformed event, rejected SQL.
    """

    pass


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(PermanentError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str, config_key: Optional[str] = None):
        self.config_key = config_key
        details = {"config_key": config_key} if config_key else None
        super().__init__(message, details)


# =============================================================================
# Database Errors
# =============================================================================


class DatabaseConnectionError(RetryableError):
    """Raised when the database cannot be reached within the connect timeout."""

    def __init__(self, host: str, message: str, details: Optional[dict[str, Any]] = None):
        self.host = host
        super().__init__(f"[{host}] {message}", details)


class DatabaseNotReadyError(DatabaseConnectionError):
    """Raised when the readiness probe runs out of attempts."""

    def __init__(self, host: str, attempts: int, last_error: str):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            host,
            f"Database not reachable after {attempts} attempt(s): {last_error}",
            {"attempts": attempts},
        )


class StatementExecutionError(PermanentError):
    """Raised when the server rejects a bootstrap statement."""

    def __init__(self, statement: str, message: str, sqlstate: Optional[str] = None):
        self.statement = statement
        self.sqlstate = sqlstate
        self.detail = message
        details = {"sqlstate": sqlstate} if sqlstate else None
        super().__init__(f"[{statement}] {message}", details)


# =============================================================================
# Orchestrator Errors
# =============================================================================


class InvalidEventError(PermanentError):
    """Raised when an invocation event is missing required fields."""

    pass


class BootstrapFailedError(PermanentError):
    """
    Raised by the Lambda entry point instead of returning a FAILED result.

    Orchestrators such as the CDK custom-resource provider framework only
    treat a thrown error as failure, ignoring the Status field.
    """

    def __init__(self, reason: str, request_id: str, logical_resource_id: str):
        self.reason = reason
        self.request_id = request_id
        self.logical_resource_id = logical_resource_id
        super().__init__(
            reason,
            {"request_id": request_id, "logical_resource_id": logical_resource_id},
        )
