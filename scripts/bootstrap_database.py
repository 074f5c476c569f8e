#!/usr/bin/env python3
"""Operator script for the Supavisor database bootstrap.

Runs the same routine the custom-resource Lambda runs, prints the SQL it
would execute, or verifies that a database already has the expected roles,
privileges and internal schema.

Usage:
    # Bootstrap the configured database (DATABASE_URL / DB_SECRET_JSON / DB_*)
    python scripts/bootstrap_database.py

    # Bootstrap an explicit database
    python scripts/bootstrap_database.py --database-url postgresql://postgres:pw@localhost:5432/postgres

    # Print the SQL, or save it to a file
    python scripts/bootstrap_database.py --print-sql
    python scripts/bootstrap_database.py --print-sql --output bootstrap.sql

    # Verify the end state
    python scripts/bootstrap_database.py --verify

Exit codes:
    0 - success / verification passed
    1 - at least one statement failed / verification failed
    2 - configuration error
"""

from __future__ import annotations

import argparse
import sys

import structlog
from pydantic import ValidationError

from dbinit.bootstrap import (
    BootstrapReport,
    VerificationReport,
    build_statements,
    render_sql,
    run_bootstrap,
    verify_database,
)
from dbinit.config.settings import Settings
from dbinit.core.exceptions import ConfigurationError, DatabaseConnectionError
from dbinit.monitoring.logging import configure_logging

logger = structlog.get_logger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG = 2


# =============================================================================
# Output
# =============================================================================

def print_report(report: BootstrapReport) -> None:
    """Print per-statement outcomes in a formatted way."""
    print("\n" + "=" * 70)
    print("Database Bootstrap Results")
    print("=" * 70)

    for outcome in report.outcomes:
        icon = "[-]" if outcome.failed else "[+]"
        print(f"  {icon} {outcome.statement.name}: {outcome.status.value} ({outcome.duration_ms:.0f} ms)")
        if outcome.error:
            print(f"      {outcome.error}")

    print(f"\nOverall Status: {'PASS' if report.succeeded else 'FAIL'}")
    if not report.succeeded:
        print(f"Reason: {report.reason()}")
    print("=" * 70)


def print_verification_results(report: VerificationReport) -> None:
    """Print verification checks in a formatted way."""
    print("\n" + "=" * 70)
    print("Database Bootstrap Verification")
    print("=" * 70)

    for check in report.checks:
        icon = "[+]" if check.passed else "[-]"
        status = "OK" if check.passed else "FAIL"
        print(f"  {icon} {check.name}: {status}")
        if check.detail:
            print(f"      {check.detail}")

    print(f"\nOverall Status: {'PASS' if report.passed else 'FAIL'}")
    if not report.passed:
        print("\nRun this script without --verify to apply the bootstrap.")
    print("=" * 70)


def save_sql(filepath: str, sql: str) -> None:
    """Save SQL to a file."""
    with open(filepath, "w", encoding="utf-8") as f:
        f.write(sql)

    print(f"SQL saved to: {filepath}")


# =============================================================================
# Main
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Bootstrap roles, privileges and the internal schema for Supavisor",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python scripts/bootstrap_database.py
    python scripts/bootstrap_database.py --print-sql --output bootstrap.sql
    python scripts/bootstrap_database.py --verify --schema _supavisor
        """,
    )
    parser.add_argument(
        "--database-url",
        type=str,
        help="Connection URL (overrides DATABASE_URL and DB_* settings)",
    )
    parser.add_argument(
        "--schema",
        type=str,
        help="Internal schema name (default: _supavisor)",
    )
    parser.add_argument(
        "--print-sql",
        action="store_true",
        help="Print the bootstrap SQL instead of running it",
    )
    parser.add_argument(
        "--output", "-o",
        type=str,
        help="With --print-sql, save SQL to file instead of printing",
    )
    parser.add_argument(
        "--verify", "-v",
        action="store_true",
        help="Verify that roles, privileges and schema are in place",
    )
    parser.add_argument(
        "--log-format",
        choices=["json", "console"],
        default="console",
        help="Log renderer (default: console)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the bootstrap script."""
    args = build_parser().parse_args(argv)

    overrides = {"log_format": args.log_format}
    if args.database_url:
        overrides["database_url"] = args.database_url
    if args.schema:
        overrides["internal_schema"] = args.schema

    try:
        settings = Settings(**overrides)
    except ValidationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG

    configure_logging(settings.log_level, settings.log_format)
    statements = build_statements(settings.internal_schema)

    if args.print_sql:
        sql = render_sql(statements)
        if args.output:
            save_sql(args.output, sql)
        else:
            print(sql)
        return EXIT_OK

    try:
        descriptor = settings.connection_descriptor()
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG

    if args.verify:
        try:
            verification = verify_database(descriptor, settings.internal_schema)
        except DatabaseConnectionError as e:
            logger.error("verification_connection_failed", error=e.message)
            print(f"\nError: {e.message}", file=sys.stderr)
            return EXIT_FAILED
        print_verification_results(verification)
        return EXIT_OK if verification.passed else EXIT_FAILED

    report = run_bootstrap(descriptor, statements)
    print_report(report)
    return EXIT_OK if report.succeeded else EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
