"""Pydantic models for the orchestrator request/response contract.

Field aliases follow the CloudFormation custom-resource event shape, so a
raw Lambda event dict validates directly and ``to_response()`` produces the
dict the provider expects back.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from dbinit.core.exceptions import InvalidEventError

CREATE = "Create"
UPDATE = "Update"
DELETE = "Delete"


class ResultStatus(str, Enum):
    """Status reported back to the orchestrator."""
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


class InvocationEvent(BaseModel):
    """Custom-resource event delivered by the orchestrator."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    request_type: str = Field(..., alias="RequestType")
    logical_resource_id: str = Field(..., alias="LogicalResourceId")
    request_id: str = Field(..., alias="RequestId")
    stack_id: str = Field(..., alias="StackId")
    physical_resource_id: Optional[str] = Field(None, alias="PhysicalResourceId")
    resource_type: Optional[str] = Field(None, alias="ResourceType")
    service_token: Optional[str] = Field(None, alias="ServiceToken")
    response_url: Optional[str] = Field(None, alias="ResponseURL")
    resource_properties: dict[str, Any] = Field(default_factory=dict, alias="ResourceProperties")
    old_resource_properties: Optional[dict[str, Any]] = Field(None, alias="OldResourceProperties")

    @classmethod
    def parse(cls, payload: Any) -> "InvocationEvent":
        """Validate a raw event, raising InvalidEventError on missing fields."""
        if isinstance(payload, cls):
            return payload
        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            fields = sorted(
                {".".join(str(part) for part in err["loc"]) or "<root>" for err in e.errors()}
            )
            raise InvalidEventError(
                f"Invalid invocation event: {', '.join(fields)}",
                {"fields": fields},
            ) from e

    @property
    def is_create(self) -> bool:
        return self.request_type == CREATE


class InvocationResult(BaseModel):
    """Response echoed back to the orchestrator."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    status: ResultStatus = Field(..., alias="Status")
    reason: str = Field(default="", alias="Reason")
    logical_resource_id: str = Field(..., alias="LogicalResourceId")
    request_id: str = Field(..., alias="RequestId")
    stack_id: str = Field(..., alias="StackId")
    physical_resource_id: Optional[str] = Field(None, alias="PhysicalResourceId")

    @classmethod
    def for_event(
        cls,
        event: InvocationEvent,
        status: ResultStatus,
        reason: str = "",
    ) -> "InvocationResult":
        """Build a result carrying the event's correlation identifiers verbatim."""
        return cls(
            status=status,
            reason=reason,
            logical_resource_id=event.logical_resource_id,
            request_id=event.request_id,
            stack_id=event.stack_id,
            physical_resource_id=event.physical_resource_id,
        )

    @property
    def succeeded(self) -> bool:
        return self.status is ResultStatus.SUCCESS

    def to_response(self) -> dict[str, Any]:
        """Aliased dict for the orchestrator; PhysicalResourceId only when known."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
