"""
Configuration Management.

This module provides centralized configuration using Pydantic Settings:

- settings: Settings class with environment variable loading
- connection: ConnectionDescriptor for the target database

Configuration sources (in order of precedence):
1. Environment variables
2. .env file
3. Default values

Passwords are held in SecretStr and only rendered when a connection is
opened; logs use ConnectionDescriptor.masked_connection_string().

Example:
    from dbinit.config import get_settings

    settings = get_settings()
    descriptor = settings.connection_descriptor()
"""

from dbinit.config.connection import ConnectionDescriptor
from dbinit.config.settings import Settings, get_settings

__all__ = [
    "ConnectionDescriptor",
    "Settings",
    "get_settings",
]
