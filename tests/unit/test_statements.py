"""Unit tests for the bootstrap statement list."""

from dbinit.bootstrap.statements import (
    BOOTSTRAP_ROLES,
    BOOTSTRAP_STATEMENTS,
    DUPLICATE_OBJECT,
    DUPLICATE_SCHEMA,
    build_statements,
    render_sql,
)


class TestStatementOrder:
    """The statement set and order are fixed."""

    def test_statement_names_in_order(self):
        assert [s.name for s in BOOTSTRAP_STATEMENTS] == [
            "create_role_anon",
            "create_role_authenticated",
            "create_role_service_role",
            "grant_public_usage",
            "default_privileges_tables",
            "default_privileges_functions",
            "default_privileges_sequences",
            "create_internal_schema",
        ]

    def test_build_is_deterministic(self):
        assert build_statements() == BOOTSTRAP_STATEMENTS

    def test_roles(self):
        assert [role.name for role in BOOTSTRAP_ROLES] == ["anon", "authenticated", "service_role"]


class TestStatementSql:
    """SQL text for each statement."""

    def _sql(self, name: str) -> str:
        return next(s.sql for s in BOOTSTRAP_STATEMENTS if s.name == name)

    def test_anon_and_authenticated_roles(self):
        assert self._sql("create_role_anon") == "CREATE ROLE anon NOLOGIN NOINHERIT"
        assert self._sql("create_role_authenticated") == "CREATE ROLE authenticated NOLOGIN NOINHERIT"

    def test_service_role_bypasses_rls(self):
        assert self._sql("create_role_service_role") == "CREATE ROLE service_role NOLOGIN NOINHERIT BYPASSRLS"

    def test_usage_grant(self):
        assert self._sql("grant_public_usage") == (
            "GRANT USAGE ON SCHEMA public TO anon, authenticated, service_role"
        )

    def test_default_privileges(self):
        for object_class in ("TABLES", "FUNCTIONS", "SEQUENCES"):
            sql = self._sql(f"default_privileges_{object_class.lower()}")
            assert sql == (
                f"ALTER DEFAULT PRIVILEGES IN SCHEMA public GRANT ALL ON {object_class} "
                "TO anon, authenticated, service_role"
            )

    def test_internal_schema_default(self):
        assert self._sql("create_internal_schema") == "CREATE SCHEMA IF NOT EXISTS _supavisor"

    def test_internal_schema_custom(self):
        statements = build_statements("_pooler")
        assert statements[-1].sql == "CREATE SCHEMA IF NOT EXISTS _pooler"


class TestTolerance:
    """Which errors count as already applied."""

    def test_role_creation_tolerates_duplicate_object(self):
        for statement in BOOTSTRAP_STATEMENTS[:3]:
            assert statement.tolerates(DUPLICATE_OBJECT)

    def test_schema_creation_tolerates_duplicate_schema(self):
        assert BOOTSTRAP_STATEMENTS[-1].tolerates(DUPLICATE_SCHEMA)

    def test_grants_tolerate_nothing(self):
        for statement in BOOTSTRAP_STATEMENTS[3:7]:
            assert not statement.tolerates(DUPLICATE_OBJECT)

    def test_none_is_never_tolerated(self):
        assert not BOOTSTRAP_STATEMENTS[0].tolerates(None)


class TestRenderSql:
    """Rendering the script for operators."""

    def test_every_statement_is_terminated(self):
        sql = render_sql()

        for statement in BOOTSTRAP_STATEMENTS:
            assert f"{statement.sql};" in sql
            assert f"-- {statement.name}" in sql

    def test_order_is_preserved(self):
        sql = render_sql()
        positions = [sql.index(s.sql) for s in BOOTSTRAP_STATEMENTS]
        assert positions == sorted(positions)
