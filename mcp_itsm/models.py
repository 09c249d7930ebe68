"""Pydantic models for ITSM service requests and issue tickets."""

import json
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


def _lower_first(key: str) -> str:
    return key[:1].lower() + key[1:]


class WireModel(BaseModel):
    """Base model for payloads exchanged with the backend.

    Fields are written in lower camel case and read case-insensitively on the
    leading letter, so ``AssetId``, ``assetId`` and ``asset_id`` all populate
    ``asset_id``.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def normalize_keys(cls, data: Any) -> Any:
        """Accept PascalCase keys from backends that emit them."""
        if isinstance(data, dict):
            return {_lower_first(k) if isinstance(k, str) else k: v for k, v in data.items()}
        return data

    def to_wire(self) -> dict[str, Any]:
        """Dump as a JSON-ready dict with camelCase keys and no null fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class StrictWireModel(WireModel):
    """Request body model that forbids unknown fields and strips strings."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


class TicketRecord(WireModel):
    """Fields shared by service requests and issue tickets.

    Unknown fields returned by the backend are kept and passed through.
    """

    model_config = ConfigDict(extra="allow")

    id: int | None = None
    requested_for: str | None = None
    country: str | None = None
    category_id: int | None = None
    sub_category_id: int | None = None
    asset_id: int | None = None
    cost_center: str | None = None
    user_severity_level: str | None = None
    status: str | None = None
    priority: str | None = None
    assigned_to: str | None = None
    escalated_to: str | None = None


class ServiceRequest(TicketRecord):
    """Service request record."""

    custom_service_name: str | None = None
    business_justification: str | None = None
    service_catalogue_id: int | None = None


class IssueTicket(TicketRecord):
    """Issue ticket record."""

    issue_title: str | None = None
    issue_description: str | None = None
    issue_catalogue_id: int | None = None


class _TicketFields(StrictWireModel):
    requested_for: str = Field(min_length=1, description="Email of the person the ticket is raised for")
    country: str = Field(min_length=1, description="Country where the ticket is raised")
    category_id: int | None = Field(None, description="Category ID")
    sub_category_id: int | None = Field(None, description="Sub-category ID")
    asset_id: int | None = Field(None, description="Asset ID")
    cost_center: str | None = Field(None, description="Cost center")
    user_severity_level: str | None = Field(None, description="User severity level")


class _TicketUpdateFields(StrictWireModel):
    id: int = Field(gt=0, description="Ticket ID")
    status: str | None = Field(None, description="New status")
    priority: str | None = Field(None, description="New priority")
    assigned_to: str | None = Field(None, description="New assignee")
    escalated_to: str | None = Field(None, description="Escalation target")


class ServiceRequestCreate(_TicketFields):
    """Create service request body."""

    custom_service_name: str = Field(min_length=1, description="Title/name of the service request")
    business_justification: str = Field(min_length=1, description="Business justification for the request")
    service_catalogue_id: int | None = Field(None, description="Service catalogue ID")


class ServiceRequestUpdate(ServiceRequestCreate, _TicketUpdateFields):
    """Update service request body."""


class IssueTicketCreate(_TicketFields):
    """Create issue ticket body."""

    issue_title: str = Field(min_length=1, description="Title of the issue ticket")
    issue_description: str = Field(min_length=1, description="Detailed description of the issue")
    issue_catalogue_id: int | None = Field(None, description="Issue catalogue ID")


class IssueTicketUpdate(IssueTicketCreate, _TicketUpdateFields):
    """Update issue ticket body."""


class CloseTicketRequest(StrictWireModel):
    """Close ticket body."""

    id: int = Field(gt=0)
    resolution: str = Field(min_length=1, description="How the ticket was resolved")
    closure_notes: str | None = None


class AssignTicketRequest(StrictWireModel):
    """Assign ticket body."""

    id: int = Field(gt=0)
    assigned_to: str = Field(min_length=1, description="User or team to assign to")
    assignment_notes: str | None = None


class PriorityChangeRequest(StrictWireModel):
    """Priority change body."""

    id: int = Field(gt=0)
    priority: str = Field(min_length=1, description="New priority level")
    reason: str = Field(min_length=1, description="Reason for the change")


class CountResponse(WireModel):
    """Count endpoint payload. A payload without ``count`` means zero."""

    count: int = 0


class DashboardSummary(WireModel):
    """Combined ticket counts for the dashboard tool."""

    service_request_count: int
    issue_ticket_count: int
    total_tickets: int
    generated_at: datetime


def _jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(value, list | tuple):
        return [_jsonable(item) for item in value]
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items() if v is not None}
    return value


def to_json(value: Any) -> str:
    """Render a model, a list of models or a plain dict as tool output JSON.

    Keys are camelCase and null fields are omitted.
    """
    return json.dumps(_jsonable(value), indent=2, default=str)
