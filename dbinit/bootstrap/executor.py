"""Execute one bootstrap statement over its own short-lived connection.

Each call opens a fresh psycopg connection (autocommit, bounded connect
timeout, server-side statement_timeout), runs a single statement and
closes the connection. Failures never propagate: they are converted into
a StatementOutcome so the caller can keep going.
"""

import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

import psycopg
import structlog

from dbinit.bootstrap.statements import BootstrapStatement
from dbinit.config.connection import ConnectionDescriptor
from dbinit.core.exceptions import (
    DatabaseConnectionError,
    StatementExecutionError,
)

logger = structlog.get_logger(__name__)

ConnectFn = Callable[..., Any]


class OutcomeStatus(str, Enum):
    """Result of running a single statement."""
    APPLIED = "applied"
    ALREADY_EXISTS = "already_exists"
    FAILED = "failed"


@dataclass(frozen=True)
class StatementOutcome:
    """What happened when a statement ran."""

    statement: BootstrapStatement
    status: OutcomeStatus
    error: Optional[str] = None
    sqlstate: Optional[str] = None
    duration_ms: float = 0.0

    @property
    def failed(self) -> bool:
        return self.status is OutcomeStatus.FAILED


def open_connection(descriptor: ConnectionDescriptor, connect: ConnectFn = psycopg.connect) -> Any:
    """Open a connection, raising DatabaseConnectionError on any driver error."""
    try:
        return connect(**descriptor.connect_kwargs())
    except psycopg.Error as e:
        raise DatabaseConnectionError(
            descriptor.host,
            f"Could not connect: {_first_line(e)}",
            {"sqlstate": e.sqlstate} if e.sqlstate else None,
        ) from e


def _run(descriptor: ConnectionDescriptor, statement: BootstrapStatement, connect: ConnectFn) -> None:
    conn = open_connection(descriptor, connect)
    try:
        conn.execute(statement.sql)
    except psycopg.Error as e:
        raise StatementExecutionError(statement.name, _first_line(e), sqlstate=e.sqlstate) from e
    finally:
        conn.close()


def execute_statement(
    descriptor: ConnectionDescriptor,
    statement: BootstrapStatement,
    connect: ConnectFn = psycopg.connect,
) -> StatementOutcome:
    """Run ``statement`` and record its outcome. Never raises."""
    log = logger.bind(statement=statement.name, sql=statement.sql, host=descriptor.host)
    started = time.perf_counter()

    try:
        _run(descriptor, statement, connect)
    except StatementExecutionError as e:
        elapsed = _elapsed_ms(started)
        if statement.tolerates(e.sqlstate):
            log.info(
                "bootstrap_statement_already_applied",
                sqlstate=e.sqlstate,
                detail=e.detail,
                duration_ms=elapsed,
            )
            return StatementOutcome(statement, OutcomeStatus.ALREADY_EXISTS, e.detail, e.sqlstate, elapsed)
        log.error(
            "bootstrap_statement_failed",
            error_type="statement",
            sqlstate=e.sqlstate,
            error=e.detail,
            duration_ms=elapsed,
        )
        return StatementOutcome(statement, OutcomeStatus.FAILED, e.detail, e.sqlstate, elapsed)
    except DatabaseConnectionError as e:
        elapsed = _elapsed_ms(started)
        log.error(
            "bootstrap_statement_failed",
            error_type="connection",
            error=e.message,
            duration_ms=elapsed,
        )
        return StatementOutcome(
            statement,
            OutcomeStatus.FAILED,
            e.message,
            e.details.get("sqlstate"),
            elapsed,
        )

    elapsed = _elapsed_ms(started)
    log.info("bootstrap_statement_applied", duration_ms=elapsed)
    return StatementOutcome(statement, OutcomeStatus.APPLIED, duration_ms=elapsed)


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


def _first_line(error: Exception) -> str:
    text = str(error).strip()
    return text.splitlines()[0] if text else type(error).__name__
