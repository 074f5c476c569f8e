"""Fixed, ordered list of bootstrap statements.

Every statement is individually idempotent: role creation tolerates
duplicate_object, schema creation uses IF NOT EXISTS, and grants /
default privileges are naturally repeatable.
"""

from dataclasses import dataclass, field

# SQLSTATE codes treated as "already done".
DUPLICATE_OBJECT = "42710"
DUPLICATE_SCHEMA = "42P06"
UNIQUE_VIOLATION = "23505"  # catalog insert race between concurrent invocations

DEFAULT_INTERNAL_SCHEMA = "_supavisor"


@dataclass(frozen=True)
class RoleSpec:
    """Expected attributes of a baseline role."""

    name: str
    bypass_rls: bool = False
    can_login: bool = False
    inherit: bool = False


BOOTSTRAP_ROLES: tuple[RoleSpec, ...] = (
    RoleSpec("anon"),
    RoleSpec("authenticated"),
    RoleSpec("service_role", bypass_rls=True),
)

_GRANTEES = ", ".join(role.name for role in BOOTSTRAP_ROLES)

DEFAULT_PRIVILEGE_CLASSES = ("tables", "functions", "sequences")


@dataclass(frozen=True)
class BootstrapStatement:
    """A single DDL statement and the error codes that mean it is already applied."""

    name: str
    sql: str
    tolerated_sqlstates: frozenset[str] = field(default_factory=frozenset)

    def tolerates(self, sqlstate: str | None) -> bool:
        return sqlstate is not None and sqlstate in self.tolerated_sqlstates


def _create_role(role: RoleSpec) -> BootstrapStatement:
    attributes = ["LOGIN" if role.can_login else "NOLOGIN"]
    attributes.append("INHERIT" if role.inherit else "NOINHERIT")
    if role.bypass_rls:
        attributes.append("BYPASSRLS")
    return BootstrapStatement(
        name=f"create_role_{role.name}",
        sql=f"CREATE ROLE {role.name} {' '.join(attributes)}",
        tolerated_sqlstates=frozenset({DUPLICATE_OBJECT, UNIQUE_VIOLATION}),
    )


def build_statements(internal_schema: str = DEFAULT_INTERNAL_SCHEMA) -> tuple[BootstrapStatement, ...]:
    """Return the bootstrap statements in execution order.

    ``internal_schema`` must already be validated as a plain identifier
    (Settings does this); it is interpolated into the DDL as-is.
    """
    statements = [_create_role(role) for role in BOOTSTRAP_ROLES]
    statements.append(
        BootstrapStatement(
            name="grant_public_usage",
            sql=f"GRANT USAGE ON SCHEMA public TO {_GRANTEES}",
        )
    )
    # ALTER DEFAULT PRIVILEGES accepts one object class per statement.
    for object_class in DEFAULT_PRIVILEGE_CLASSES:
        statements.append(
            BootstrapStatement(
                name=f"default_privileges_{object_class}",
                sql=(
                    f"ALTER DEFAULT PRIVILEGES IN SCHEMA public "
                    f"GRANT ALL ON {object_class.upper()} TO {_GRANTEES}"
                ),
            )
        )
    statements.append(
        BootstrapStatement(
            name="create_internal_schema",
            sql=f"CREATE SCHEMA IF NOT EXISTS {internal_schema}",
            tolerated_sqlstates=frozenset({DUPLICATE_SCHEMA, UNIQUE_VIOLATION}),
        )
    )
    return tuple(statements)


BOOTSTRAP_STATEMENTS = build_statements()


def render_sql(statements: tuple[BootstrapStatement, ...] = BOOTSTRAP_STATEMENTS) -> str:
    """Render the statements as a runnable SQL script."""
    lines = [
        "-- Supavisor database bootstrap",
        "-- Each statement is independent; duplicate role errors are expected on re-runs.",
        "",
    ]
    for statement in statements:
        lines.append(f"-- {statement.name}")
        lines.append(f"{statement.sql};")
        lines.append("")
    return "\n".join(lines)
