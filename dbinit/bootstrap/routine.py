"""Database bootstrap routine.

Runs every bootstrap statement in order, one connection per statement,
recording each outcome. A failing statement never stops the ones after
it; the overall status is derived from the recorded outcomes.

Usage:
    from dbinit.bootstrap import run_bootstrap

    report = run_bootstrap(descriptor)
    if not report.succeeded:
        print(report.reason())
"""

from dataclasses import dataclass, field
from typing import Sequence

import psycopg
import structlog

from dbinit.bootstrap.executor import ConnectFn, StatementOutcome, execute_statement
from dbinit.bootstrap.statements import BOOTSTRAP_STATEMENTS, BootstrapStatement
from dbinit.config.connection import ConnectionDescriptor

logger = structlog.get_logger(__name__)


@dataclass
class BootstrapReport:
    """Ordered (statement, outcome) record of one routine run."""

    outcomes: list[StatementOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return not self.failures

    @property
    def failures(self) -> list[StatementOutcome]:
        return [outcome for outcome in self.outcomes if outcome.failed]

    def reason(self) -> str:
        """Human-readable summary of failures; empty when everything converged."""
        failures = self.failures
        if not failures:
            return ""
        parts = "; ".join(
            f"{outcome.statement.name} ({outcome.error})" for outcome in failures
        )
        return f"{len(failures)} of {len(self.outcomes)} bootstrap statements failed: {parts}"

    def summary(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for outcome in self.outcomes:
            counts[outcome.status.value] = counts.get(outcome.status.value, 0) + 1
        return counts


def run_bootstrap(
    descriptor: ConnectionDescriptor,
    statements: Sequence[BootstrapStatement] = BOOTSTRAP_STATEMENTS,
    connect: ConnectFn = psycopg.connect,
) -> BootstrapReport:
    """Apply ``statements`` sequentially against the database in ``descriptor``."""
    logger.info(
        "bootstrap_started",
        database=descriptor.masked_connection_string(),
        statements=len(statements),
    )

    report = BootstrapReport()
    for statement in statements:
        report.outcomes.append(execute_statement(descriptor, statement, connect))

    if report.succeeded:
        logger.info("bootstrap_completed", **report.summary())
    else:
        logger.error(
            "bootstrap_completed_with_failures",
            failed=[outcome.statement.name for outcome in report.failures],
            **report.summary(),
        )
    return report
