"""Orchestrator request/response models."""

from dbinit.models.events import (
    CREATE,
    DELETE,
    UPDATE,
    InvocationEvent,
    InvocationResult,
    ResultStatus,
)

__all__ = [
    "CREATE",
    "DELETE",
    "UPDATE",
    "InvocationEvent",
    "InvocationResult",
    "ResultStatus",
]
