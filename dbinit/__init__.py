"""
Supavisor database bootstrap.

Prepares an Aurora PostgreSQL cluster for the Supavisor connection pooler:
baseline roles (anon, authenticated, service_role), their privileges on
schema public, and the pooler's internal schema. Invoked once by the
CloudFormation custom-resource provider after the cluster is reachable.
"""

__version__ = "0.1.0"
