"""
Pytest Configuration and Shared Fixtures.

This module provides common fixtures for all tests:

- descriptor: ConnectionDescriptor for a fictional database
- settings: Settings isolated from the process environment and .env
- fake_db: In-memory stand-in for psycopg.connect
- sample_event: CloudFormation custom-resource Create event
"""

from typing import Any, Callable, Optional

import pytest

from dbinit.config.connection import ConnectionDescriptor
from dbinit.config.settings import Settings, get_settings

DB_ENV_VARS = (
    "DATABASE_URL",
    "DB_SECRET_JSON",
    "DB_HOST",
    "DB_PORT",
    "DB_NAME",
    "DB_USERNAME",
    "DB_PASSWORD",
    "INTERNAL_SCHEMA",
    "REPORT_FAILURES",
    "FAIL_BY_RAISING",
    "READINESS_ATTEMPTS",
    "READINESS_WAIT_SECONDS",
    "APP_ENV",
    "LOG_LEVEL",
    "LOG_FORMAT",
)


class FakeCursor:
    """Minimal cursor returned by FakeConnection.execute."""

    def __init__(self, rows: list[tuple]):
        self._rows = rows

    def fetchall(self) -> list[tuple]:
        return list(self._rows)

    def fetchone(self) -> Optional[tuple]:
        return self._rows[0] if self._rows else None


class FakeConnection:
    """Records executed SQL on its FakeDatabase."""

    def __init__(self, db: "FakeDatabase"):
        self.db = db
        self.closed = False

    def execute(self, sql: str, params: Any = None) -> FakeCursor:
        self.db.executed.append(sql)
        for fragment, error in self.db.statement_errors.items():
            if fragment in sql:
                raise error
        return FakeCursor(self.db.responder(sql, params))

    def close(self) -> None:
        self.closed = True
        self.db.closed_connections += 1


class FakeDatabase:
    """Stand-in for ``psycopg.connect``.

    - connect_failures: number of initial connect() calls that fail
    - connect_error: exception raised by failing connect() calls
    - statement_errors: SQL fragment -> exception raised by execute()
    - responder: (sql, params) -> rows for queries
    """

    def __init__(self):
        self.connect_calls: list[dict[str, Any]] = []
        self.connections: list[FakeConnection] = []
        self.executed: list[str] = []
        self.statement_errors: dict[str, Exception] = {}
        self.connect_failures = 0
        self.connect_error: Optional[Exception] = None
        self.closed_connections = 0
        self.responder: Callable[[str, Any], list[tuple]] = lambda sql, params: []

    def connect(self, **kwargs: Any) -> FakeConnection:
        self.connect_calls.append(kwargs)
        if self.connect_error is not None and len(self.connect_calls) <= self.connect_failures:
            raise self.connect_error
        conn = FakeConnection(self)
        self.connections.append(conn)
        return conn

    def refuse_connections(self, error: Exception, times: int = 10_000) -> None:
        self.connect_error = error
        self.connect_failures = times


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep real environment variables and .env files out of Settings."""
    for name in DB_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def descriptor() -> ConnectionDescriptor:
    """Return a descriptor for a fictional database."""
    return ConnectionDescriptor(
        host="db.internal",
        port=5432,
        dbname="postgres",
        username="postgres",
        password="s3cret",
    )


@pytest.fixture
def settings() -> Settings:
    """Return default settings without reading any .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def fake_db() -> FakeDatabase:
    """Return a fresh fake database."""
    return FakeDatabase()


@pytest.fixture
def sample_event() -> dict:
    """Return a sample Create event as delivered by the provider framework."""
    return {
        "RequestType": "Create",
        "ServiceToken": "arn:aws:lambda:eu-west-1:123456789012:function:dbInitProvider",
        "ResponseURL": "https://cloudformation-custom-resource-response.s3.amazonaws.com/x",
        "StackId": "stack-1",
        "RequestId": "req-123",
        "LogicalResourceId": "res-abc",
        "ResourceType": "AWS::CloudFormation::CustomResource",
        "ResourceProperties": {"host": "db.internal"},
    }
