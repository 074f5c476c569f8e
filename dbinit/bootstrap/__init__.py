"""
Database bootstrap.

- statements: fixed, ordered idempotent DDL (roles, grants, internal schema)
- executor: one statement per short-lived connection, failures recorded
- routine: runs every statement and derives the overall status
- readiness: optional connection probe before the routine
- verify: catalog checks for the converged end state
"""

from dbinit.bootstrap.executor import (
    OutcomeStatus,
    StatementOutcome,
    execute_statement,
)
from dbinit.bootstrap.readiness import wait_for_database
from dbinit.bootstrap.routine import BootstrapReport, run_bootstrap
from dbinit.bootstrap.statements import (
    BOOTSTRAP_ROLES,
    BOOTSTRAP_STATEMENTS,
    BootstrapStatement,
    RoleSpec,
    build_statements,
    render_sql,
)
from dbinit.bootstrap.verify import CheckResult, VerificationReport, verify_database

__all__ = [
    # Statements
    "BOOTSTRAP_ROLES",
    "BOOTSTRAP_STATEMENTS",
    "BootstrapStatement",
    "RoleSpec",
    "build_statements",
    "render_sql",
    # Execution
    "OutcomeStatus",
    "StatementOutcome",
    "execute_statement",
    "BootstrapReport",
    "run_bootstrap",
    # Readiness
    "wait_for_database",
    # Verification
    "CheckResult",
    "VerificationReport",
    "verify_database",
]
