"""
Monitoring helpers.

- logging: structlog configuration shared by the Lambda handler and CLI
"""

from dbinit.monitoring.logging import configure_logging

__all__ = ["configure_logging"]
