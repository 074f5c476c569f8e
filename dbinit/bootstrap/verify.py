"""Verify the end state the bootstrap routine is supposed to converge to.

Checks, against the system catalogs:
- each baseline role exists with NOLOGIN / NOINHERIT (service_role also BYPASSRLS)
- each role holds USAGE on schema public
- default privileges in public cover tables, sequences and functions for each role
- the internal schema exists

Default privileges are tracked per granting role, so the check looks at
entries owned by the connecting user, the same user that ran the bootstrap.
"""

from dataclasses import dataclass, field
from typing import Any

import psycopg
import structlog

from dbinit.bootstrap.executor import ConnectFn, open_connection
from dbinit.bootstrap.statements import (
    BOOTSTRAP_ROLES,
    DEFAULT_INTERNAL_SCHEMA,
    DEFAULT_PRIVILEGE_CLASSES,
)
from dbinit.config.connection import ConnectionDescriptor

logger = structlog.get_logger(__name__)

ROLES_SQL = """
    SELECT rolname, rolcanlogin, rolinherit, rolbypassrls
    FROM pg_roles
    WHERE rolname = ANY(%s)
"""

SCHEMA_USAGE_SQL = "SELECT has_schema_privilege(%s, 'public', 'USAGE')"

DEFAULT_ACL_SQL = """
    SELECT d.defaclobjtype, d.defaclacl::text[]
    FROM pg_default_acl d
    JOIN pg_namespace n ON n.oid = d.defaclnamespace
    WHERE n.nspname = 'public'
      AND d.defaclrole = (SELECT oid FROM pg_roles WHERE rolname = current_user)
"""

SCHEMA_EXISTS_SQL = "SELECT count(*) FROM pg_namespace WHERE nspname = %s"

# pg_default_acl.defaclobjtype codes
_OBJTYPE_CODES = {"tables": "r", "sequences": "S", "functions": "f"}


@dataclass(frozen=True)
class CheckResult:
    """One verification check."""

    name: str
    passed: bool
    detail: str = ""


@dataclass
class VerificationReport:
    """All checks from one verification run."""

    checks: list[CheckResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(check.passed for check in self.checks)

    @property
    def problems(self) -> list[CheckResult]:
        return [check for check in self.checks if not check.passed]

    def add(self, name: str, passed: bool, detail: str = "") -> None:
        self.checks.append(CheckResult(name, passed, detail))


def _grantees(acl: list[str] | None) -> set[str]:
    """Extract grantee names from aclitem strings like ``anon=arwdDxt/postgres``."""
    names = set()
    for item in acl or []:
        grantee = item.split("=", 1)[0].strip('"')
        if grantee:
            names.add(grantee)
    return names


def _check_roles(conn: Any, report: VerificationReport) -> None:
    names = [role.name for role in BOOTSTRAP_ROLES]
    rows = conn.execute(ROLES_SQL, (names,)).fetchall()
    found = {row[0]: row for row in rows}

    for role in BOOTSTRAP_ROLES:
        row = found.get(role.name)
        if row is None:
            report.add(f"role_{role.name}", False, "role does not exist")
            continue
        _, can_login, inherit, bypass_rls = row
        mismatches = []
        if can_login != role.can_login:
            mismatches.append(f"rolcanlogin={can_login}")
        if inherit != role.inherit:
            mismatches.append(f"rolinherit={inherit}")
        if bypass_rls != role.bypass_rls:
            mismatches.append(f"rolbypassrls={bypass_rls}")
        report.add(f"role_{role.name}", not mismatches, ", ".join(mismatches))


def _check_usage(conn: Any, report: VerificationReport) -> None:
    for role in BOOTSTRAP_ROLES:
        try:
            row = conn.execute(SCHEMA_USAGE_SQL, (role.name,)).fetchone()
        except psycopg.errors.UndefinedObject:
            report.add(f"usage_public_{role.name}", False, "role does not exist")
            continue
        has_usage = bool(row and row[0])
        report.add(
            f"usage_public_{role.name}",
            has_usage,
            "" if has_usage else "missing USAGE on schema public",
        )


def _check_default_privileges(conn: Any, report: VerificationReport) -> None:
    rows = conn.execute(DEFAULT_ACL_SQL).fetchall()
    by_type = {objtype: _grantees(acl) for objtype, acl in rows}

    for object_class in DEFAULT_PRIVILEGE_CLASSES:
        grantees = by_type.get(_OBJTYPE_CODES[object_class], set())
        missing = [role.name for role in BOOTSTRAP_ROLES if role.name not in grantees]
        report.add(
            f"default_privileges_{object_class}",
            not missing,
            f"not granted to: {', '.join(missing)}" if missing else "",
        )


def _check_schema(conn: Any, report: VerificationReport, internal_schema: str) -> None:
    row = conn.execute(SCHEMA_EXISTS_SQL, (internal_schema,)).fetchone()
    count = row[0] if row else 0
    report.add(
        f"schema_{internal_schema}",
        count == 1,
        "" if count == 1 else "schema does not exist",
    )


def verify_database(
    descriptor: ConnectionDescriptor,
    internal_schema: str = DEFAULT_INTERNAL_SCHEMA,
    connect: ConnectFn = psycopg.connect,
) -> VerificationReport:
    """Inspect the catalogs and report whether the bootstrap end state holds.

    Raises:
        DatabaseConnectionError: When the database cannot be reached.
    """
    report = VerificationReport()
    conn = open_connection(descriptor, connect)
    try:
        _check_roles(conn, report)
        _check_usage(conn, report)
        _check_default_privileges(conn, report)
        _check_schema(conn, report, internal_schema)
    finally:
        conn.close()

    logger.info(
        "bootstrap_verification_finished",
        passed=report.passed,
        problems=[check.name for check in report.problems],
    )
    return report
