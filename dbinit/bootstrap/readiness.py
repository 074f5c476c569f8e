"""Readiness probe run before the bootstrap statements.

A freshly created Aurora Serverless cluster can report "available" to the
orchestrator a little before it accepts connections. The probe issues
``SELECT 1`` up to ``attempts`` times; with the default single attempt no
retry happens at all.
"""

import psycopg
import structlog
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from dbinit.bootstrap.executor import ConnectFn, open_connection
from dbinit.config.connection import ConnectionDescriptor
from dbinit.core.exceptions import DatabaseConnectionError, DatabaseNotReadyError

logger = structlog.get_logger(__name__)


def _probe(descriptor: ConnectionDescriptor, connect: ConnectFn) -> None:
    conn = open_connection(descriptor, connect)
    try:
        conn.execute("SELECT 1")
    except psycopg.Error as e:
        raise DatabaseConnectionError(descriptor.host, f"Probe query failed: {e}") from e
    finally:
        conn.close()


def _log_retry(retry_state) -> None:
    logger.warning(
        "database_not_ready",
        attempt=retry_state.attempt_number,
        error=str(retry_state.outcome.exception()),
    )


def wait_for_database(
    descriptor: ConnectionDescriptor,
    attempts: int = 1,
    wait_seconds: float = 2.0,
    connect: ConnectFn = psycopg.connect,
) -> None:
    """Block until the database answers or ``attempts`` are exhausted.

    Raises:
        DatabaseNotReadyError: When every attempt failed.
    """
    retrying = Retrying(
        retry=retry_if_exception_type(DatabaseConnectionError),
        stop=stop_after_attempt(attempts),
        wait=wait_fixed(wait_seconds),
        before_sleep=_log_retry,
        reraise=True,
    )
    try:
        retrying(_probe, descriptor, connect)
    except DatabaseConnectionError as e:
        raise DatabaseNotReadyError(descriptor.host, attempts, e.message) from e

    logger.info("database_ready", host=descriptor.host)
