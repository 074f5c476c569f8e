"""
Supavisor DB Init Test Suite.

- unit/: Descriptor, settings, statements, executor, routine, readiness,
  verification, event models, handler and CLI tests (fake driver)
- integration/: Live PostgreSQL tests, enabled by TEST_DATABASE_URL
- conftest.py: Shared fixtures and test configuration

Run tests with: pytest
Run integration tests with: TEST_DATABASE_URL=postgresql://... pytest tests/integration
"""
