"""
Orchestrator entry point.

The provisioning layer invokes this once after the database cluster is
reachable and waits for the returned result before continuing. The
routine behaves the same for every request type; only the log line for
``Create`` differs.

Contract:
    report_failures=True (default): FAILED with a reason whenever any
    statement failed, so the orchestrator can halt or roll back.
    report_failures=False: always SUCCESS, failures are only logged.

Usage (Lambda):
    handler = "main.handler"
"""

from typing import Any, Optional

import psycopg
import structlog
from pydantic import ValidationError

from dbinit.bootstrap.executor import ConnectFn
from dbinit.bootstrap.readiness import wait_for_database
from dbinit.bootstrap.routine import run_bootstrap
from dbinit.bootstrap.statements import build_statements
from dbinit.config.connection import ConnectionDescriptor
from dbinit.config.settings import Settings, get_settings
from dbinit.core.exceptions import (
    BootstrapFailedError,
    ConfigurationError,
    DatabaseNotReadyError,
)
from dbinit.models.events import InvocationEvent, InvocationResult, ResultStatus
from dbinit.monitoring.logging import configure_logging

logger = structlog.get_logger(__name__)


def _conclude(
    event: InvocationEvent,
    reason: str,
    report_failures: bool,
) -> InvocationResult:
    """Turn a failure reason (empty on success) into a result under the active contract."""
    log = logger.bind(request_id=event.request_id)
    if not reason:
        log.info("invocation_succeeded")
        return InvocationResult.for_event(event, ResultStatus.SUCCESS)

    if report_failures:
        log.error("invocation_failed", reason=reason)
        return InvocationResult.for_event(event, ResultStatus.FAILED, reason)

    log.warning("invocation_failures_suppressed", reason=reason)
    return InvocationResult.for_event(event, ResultStatus.SUCCESS)


def handle_event(
    event: InvocationEvent | dict[str, Any],
    descriptor: ConnectionDescriptor,
    settings: Settings,
    connect: ConnectFn = psycopg.connect,
) -> InvocationResult:
    """Run the bootstrap for one invocation and build the orchestrator result.

    Args:
        event: Raw event dict or a parsed InvocationEvent.
        descriptor: Target database; never read from the environment here.
        settings: Behaviour switches (contract, schema name, readiness).
        connect: psycopg-compatible connect callable.

    Raises:
        InvalidEventError: When the event lacks correlation identifiers.
    """
    event = InvocationEvent.parse(event)
    log = logger.bind(
        request_id=event.request_id,
        logical_resource_id=event.logical_resource_id,
        stack_id=event.stack_id,
    )
    log.info(
        "invocation_received",
        request_type=event.request_type,
        physical_resource_id=event.physical_resource_id,
        database=descriptor.masked_connection_string(),
    )
    if event.is_create:
        log.info("create_event")
    else:
        log.info("unmatched_event_type", request_type=event.request_type)

    if settings.readiness_attempts > 1:
        try:
            wait_for_database(
                descriptor,
                attempts=settings.readiness_attempts,
                wait_seconds=settings.readiness_wait_seconds,
                connect=connect,
            )
        except DatabaseNotReadyError as e:
            if settings.report_failures:
                return _conclude(event, e.message, report_failures=True)
            log.warning("database_not_ready_continuing", error=e.message)

    report = run_bootstrap(
        descriptor,
        statements=build_statements(settings.internal_schema),
        connect=connect,
    )
    return _conclude(event, report.reason(), settings.report_failures)


def _settings_error(error: ValidationError) -> ConfigurationError:
    first = error.errors()[0]
    key = ".".join(str(part) for part in first["loc"]) or None
    prefix = f"{key}: " if key else ""
    return ConfigurationError(f"Invalid settings: {prefix}{first['msg']}", config_key=key)


def lambda_handler(event: dict[str, Any], context: Optional[Any] = None) -> dict[str, Any]:
    """AWS Lambda entry point.

    Resolves settings and the connection descriptor from the environment,
    then delegates to handle_event. Settings that fail validation yield a
    FAILED result; ``fail_by_raising`` cannot be honoured in that case.
    """
    parsed = InvocationEvent.parse(event)

    try:
        settings = get_settings()
    except ValidationError as e:
        configure_logging()
        return _conclude(parsed, str(_settings_error(e)), report_failures=True).to_response()

    configure_logging(settings.log_level, settings.log_format)
    logger.info(
        "lambda_invoked",
        aws_request_id=getattr(context, "aws_request_id", None),
        request_id=parsed.request_id,
    )

    try:
        descriptor = settings.connection_descriptor()
    except ConfigurationError as e:
        result = _conclude(parsed, str(e), settings.report_failures)
    else:
        result = handle_event(parsed, descriptor, settings)

    if not result.succeeded and settings.fail_by_raising:
        raise BootstrapFailedError(result.reason, result.request_id, result.logical_resource_id)

    return result.to_response()
