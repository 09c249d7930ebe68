"""ITSM MCP Server implementation."""

import logging
import os
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Annotated, Any

import anyio.to_thread
import requests
from dotenv import load_dotenv
from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import Field, ValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse

from .client import ISSUE_TICKETS, SERVICE_REQUESTS, ItsmError, TicketClient, TicketKind, create_session
from .config import ItsmConfig
from .models import (
    DashboardSummary,
    IssueTicketCreate,
    IssueTicketUpdate,
    ServiceRequestCreate,
    ServiceRequestUpdate,
    to_json,
)

# Configure logging
logger = logging.getLogger(__name__)

TicketId = Annotated[int, Field(gt=0, description="Internal ID of the ticket")]


# Tool annotation constants
def _read_only_annotations(title: str) -> ToolAnnotations:
    """Create read-only tool annotations with title."""
    return ToolAnnotations(
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=True,
        title=title,
    )


def _write_annotations(title: str) -> ToolAnnotations:
    """Create write tool annotations with title."""
    return ToolAnnotations(
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=False,
        openWorldHint=True,
        title=title,
    )


def _idempotent_write_annotations(title: str) -> ToolAnnotations:
    """Create idempotent write tool annotations with title."""
    return ToolAnnotations(
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=True,
        title=title,
    )


@dataclass(frozen=True)
class ToolOutcome:
    """Result of one tool invocation: either a value or an error message.

    ``render()`` is the only place an error becomes the ``{"error": ...}``
    payload returned to the agent.
    """

    value: Any = None
    error: str | None = None

    @classmethod
    def success(cls, value: Any) -> "ToolOutcome":
        return cls(value=value)

    @classmethod
    def failure(cls, message: str) -> "ToolOutcome":
        return cls(error=message or "Unknown error")

    @property
    def ok(self) -> bool:
        return self.error is None

    def render(self) -> str:
        if self.error is not None:
            return to_json({"error": self.error})
        return to_json(self.value)


class ItsmMCPServer:
    """ITSM MCP Server with proper client lifecycle management."""

    def __init__(self, host: str = "127.0.0.1", port: int = 8000) -> None:
        """Initialize the server.

        Args:
            host: Host to bind for HTTP transport (default: 127.0.0.1)
            port: Port to bind for HTTP transport (default: 8000)
        """
        self.config: ItsmConfig | None = None
        self.session: requests.Session | None = None
        self.clients: dict[str, TicketClient[Any]] = {}
        # Create FastMCP with lifespan configured
        self.mcp = FastMCP("itsm_mcp", host=host, port=port, lifespan=self._create_lifespan())
        self._setup_tools()

    def _create_lifespan(self) -> Any:
        """Create the lifespan context manager for the server."""

        @asynccontextmanager
        async def lifespan(_app: FastMCP) -> AsyncIterator[None]:
            """Initialize resources on startup and cleanup on shutdown."""
            await self.initialize()
            try:
                yield
            finally:
                self.shutdown()

        return lifespan

    def get_client(self, kind: TicketKind[Any]) -> TicketClient[Any]:
        """Get the client for a ticket kind, ensuring it's initialized."""
        client = self.clients.get(kind.resource)
        if client is None:
            raise RuntimeError("ITSM clients not initialized")
        return client

    async def initialize(self) -> None:
        """Load configuration and build the backend clients on server startup."""
        cwd_env = Path.cwd() / ".env"
        if cwd_env.exists():
            load_dotenv(cwd_env)
            logger.info("Loaded environment from %s", cwd_env)

        # Also support loading from parent directories (for when running from subdirs)
        load_dotenv()

        try:
            config = ItsmConfig.from_env()
        except Exception:
            logger.exception("Failed to load ITSM configuration")
            raise

        self.config = config
        self.session = create_session(config)
        for kind in (SERVICE_REQUESTS, ISSUE_TICKETS):
            self.clients[kind.resource] = TicketClient(kind, config, self.session)
        logger.info("ITSM clients initialized for %s", config.base_url)

    def shutdown(self) -> None:
        """Release the shared HTTP session."""
        self.clients.clear()
        if self.session is not None:
            self.session.close()
            self.session = None
            logger.info("ITSM session closed")

    async def _call(self, func: Callable[[], Any]) -> ToolOutcome:
        """Run a blocking client call off the event loop and capture its outcome."""
        try:
            value = await anyio.to_thread.run_sync(func)
        except (ItsmError, ValidationError) as e:
            logger.warning("ITSM call failed: %s", e)
            return ToolOutcome.failure(str(e))
        return ToolOutcome.success(value)

    def _setup_tools(self) -> None:
        """Register all tools with the MCP server."""
        for kind in (SERVICE_REQUESTS, ISSUE_TICKETS):
            self._setup_ticket_tools(kind)
        self._setup_service_request_write_tools()
        self._setup_issue_ticket_write_tools()
        self._setup_dashboard_tools()

    def _setup_ticket_tools(self, kind: TicketKind[Any]) -> None:  # noqa: PLR0915
        """Register the read, search and workflow tools shared by both ticket kinds."""
        name = kind.slug
        names = kind.slug_plural
        title = kind.singular.title()
        titles = kind.plural.title()

        @self.mcp.tool(
            name=f"itsm_get_all_{names}",
            description=f"Get all {kind.plural}. Returns a complete list of {kind.plural} in the system.",
            annotations=_read_only_annotations(f"Get All {titles}"),
        )
        async def get_all() -> str:
            outcome = await self._call(lambda: self.get_client(kind).list_all())
            return outcome.render()

        @self.mcp.tool(
            name=f"itsm_get_filtered_{names}",
            description=(
                f"Get filtered {kind.plural} based on user context - My Tickets, History, or Assigned to Me."
            ),
            annotations=_read_only_annotations(f"Get Filtered {titles}"),
        )
        async def get_filtered(
            is_my_tickets: Annotated[bool, Field(description="Only tickets requested by the current user")] = False,
            is_history: Annotated[bool, Field(description="Only historical/closed tickets")] = False,
            is_assigned_to_me: Annotated[bool, Field(description="Only tickets assigned to the current user")] = False,
        ) -> str:
            outcome = await self._call(
                lambda: self.get_client(kind).list_filtered(is_my_tickets, is_history, is_assigned_to_me)
            )
            return outcome.render()

        @self.mcp.tool(
            name=f"itsm_get_{name}",
            description=f"Get a specific {kind.singular} by its ID.",
            annotations=_read_only_annotations(f"Get {title} Details"),
        )
        async def get_by_id(ticket_id: TicketId) -> str:
            outcome = await self._call(lambda: self.get_client(kind).get(ticket_id))
            if outcome.ok and outcome.value is None:
                outcome = ToolOutcome.failure(kind.not_found_message)
            return outcome.render()

        @self.mcp.tool(
            name=f"itsm_get_{names}_by_asset",
            description=f"Get all {kind.plural} for a specific asset.",
            annotations=_read_only_annotations(f"Get {titles} By Asset"),
        )
        async def get_by_asset(asset_id: Annotated[int, Field(gt=0, description="The ID of the asset")]) -> str:
            outcome = await self._call(lambda: self.get_client(kind).list_by_asset(asset_id))
            return outcome.render()

        @self.mcp.tool(
            name=f"itsm_get_{name}_count",
            description=f"Get the total count of {kind.plural}.",
            annotations=_read_only_annotations(f"Get {title} Count"),
        )
        async def get_count() -> str:
            outcome = await self._call(lambda: {"count": self.get_client(kind).count()})
            return outcome.render()

        @self.mcp.tool(
            name=f"itsm_search_{names}",
            description=(
                f"Search {kind.plural} by title, description, or any text content. "
                "Optional filters narrow the results by status, priority or assignee."
            ),
            annotations=_read_only_annotations(f"Search {titles}"),
        )
        async def search(
            search_query: Annotated[
                str, Field(min_length=1, description="Text to find in titles, descriptions or content")
            ],
            status: Annotated[str | None, Field(description="Filter by status (optional)")] = None,
            priority: Annotated[str | None, Field(description="Filter by priority (optional)")] = None,
            assigned_to: Annotated[str | None, Field(description="Filter by assigned user (optional)")] = None,
        ) -> str:
            outcome = await self._call(
                lambda: self.get_client(kind).search(search_query, status, priority, assigned_to)
            )
            return outcome.render()

        @self.mcp.tool(
            name=f"itsm_get_{names}_by_status",
            description=f"Get {kind.plural} by status. Helps to filter and manage tickets by their current state.",
            annotations=_read_only_annotations(f"Get {titles} By Status"),
        )
        async def get_by_status(
            status: Annotated[
                str, Field(min_length=1, description="Status to filter by (e.g., 'Open', 'In Progress', 'Closed')")
            ],
        ) -> str:
            outcome = await self._call(lambda: self.get_client(kind).list_by_status(status))
            return outcome.render()

        @self.mcp.tool(
            name=f"itsm_get_{names}_by_priority",
            description=f"Get {kind.plural} by priority level. Helps prioritize and manage critical work.",
            annotations=_read_only_annotations(f"Get {titles} By Priority"),
        )
        async def get_by_priority(
            priority: Annotated[
                str, Field(min_length=1, description="Priority to filter by (e.g., 'Low', 'High', 'Critical')")
            ],
        ) -> str:
            outcome = await self._call(lambda: self.get_client(kind).list_by_priority(priority))
            return outcome.render()

        @self.mcp.tool(
            name=f"itsm_close_{name}",
            description=f"Close a {kind.singular} by marking it as resolved. Requires resolution details.",
            annotations=_write_annotations(f"Close {title}"),
        )
        async def close(
            ticket_id: TicketId,
            resolution: Annotated[str, Field(min_length=1, description="How the ticket was resolved")],
            closure_notes: Annotated[str | None, Field(description="Optional closure notes")] = None,
        ) -> str:
            outcome = await self._call(lambda: self.get_client(kind).close(ticket_id, resolution, closure_notes))
            return outcome.render()

        @self.mcp.tool(
            name=f"itsm_assign_{name}",
            description=f"Assign a {kind.singular} to a specific user or team.",
            annotations=_idempotent_write_annotations(f"Assign {title}"),
        )
        async def assign(
            ticket_id: TicketId,
            assigned_to: Annotated[str, Field(min_length=1, description="User or team to assign the ticket to")],
            assignment_notes: Annotated[str | None, Field(description="Optional assignment notes")] = None,
        ) -> str:
            outcome = await self._call(
                lambda: self.get_client(kind).assign(ticket_id, assigned_to, assignment_notes)
            )
            return outcome.render()

        @self.mcp.tool(
            name=f"itsm_update_{name}_priority",
            description=f"Update the priority of a {kind.singular} to escalate or de-escalate it.",
            annotations=_idempotent_write_annotations(f"Update {title} Priority"),
        )
        async def change_priority(
            ticket_id: TicketId,
            priority: Annotated[str, Field(min_length=1, description="New priority (e.g., 'Low', 'High', 'Critical')")],
            reason: Annotated[str, Field(min_length=1, description="Reason for the priority change")],
        ) -> str:
            outcome = await self._call(lambda: self.get_client(kind).change_priority(ticket_id, priority, reason))
            return outcome.render()

    def _setup_service_request_write_tools(self) -> None:
        """Register service request create/update tools."""

        @self.mcp.tool(
            name="itsm_create_service_request",
            annotations=_write_annotations("Create Service Request"),
        )
        async def itsm_create_service_request(
            custom_service_name: Annotated[str, Field(min_length=1, description="Title/name of the service request")],
            business_justification: Annotated[str, Field(min_length=1, description="Business justification")],
            requested_for: Annotated[str, Field(min_length=1, description="Email of the person requesting")],
            country: Annotated[str, Field(min_length=1, description="Country where the request is made")],
            service_catalogue_id: Annotated[int | None, Field(description="Service catalogue ID (optional)")] = None,
            category_id: Annotated[int | None, Field(description="Category ID (optional)")] = None,
            sub_category_id: Annotated[int | None, Field(description="Sub-category ID (optional)")] = None,
            asset_id: Annotated[int | None, Field(description="Asset ID (optional)")] = None,
            cost_center: Annotated[str | None, Field(description="Cost center (optional)")] = None,
            user_severity_level: Annotated[str | None, Field(description="User severity level (optional)")] = None,
        ) -> str:
            """Create a new service request.

            Args:
                custom_service_name: Title/name of the requested service (required)
                business_justification: Why the service is needed (required)
                requested_for: Email of the person the request is for (required)
                country: Country where the request is made (required)
                service_catalogue_id, category_id, sub_category_id, asset_id: Optional classification IDs
                cost_center, user_severity_level: Optional classification text

            Returns:
                str: The created service request as JSON, with the ID assigned by the backend:

                ```json
                {
                    "id": 42,
                    "customServiceName": "New monitor",
                    "businessJustification": "Second screen for design work",
                    "requestedFor": "john.roe@example.com",
                    "country": "DE",
                    "status": "Open"
                }
                ```

            Examples:
                - Use when: "Order a second monitor for John" -> custom_service_name, justification, requested_for
                - Don't use when: Something is broken (use itsm_create_issue_ticket)
                - Don't use when: The request already exists (use itsm_update_service_request)

            Error Handling:
                - Returns {"error": "Failed to create service request: 400 Bad Request - <backend message>"}
                  when the backend rejects the request
                - Optional fields left empty are not sent
            """

            def _send() -> Any:
                body = ServiceRequestCreate(
                    custom_service_name=custom_service_name,
                    business_justification=business_justification,
                    requested_for=requested_for,
                    country=country,
                    service_catalogue_id=service_catalogue_id,
                    category_id=category_id,
                    sub_category_id=sub_category_id,
                    asset_id=asset_id,
                    cost_center=cost_center,
                    user_severity_level=user_severity_level,
                )
                return self.get_client(SERVICE_REQUESTS).create(body)

            outcome = await self._call(_send)
            return outcome.render()

        @self.mcp.tool(
            name="itsm_update_service_request",
            annotations=_idempotent_write_annotations("Update Service Request"),
        )
        async def itsm_update_service_request(
            ticket_id: TicketId,
            custom_service_name: Annotated[str, Field(min_length=1, description="Title/name of the service request")],
            business_justification: Annotated[str, Field(min_length=1, description="Business justification")],
            requested_for: Annotated[str, Field(min_length=1, description="Email of the person requesting")],
            country: Annotated[str, Field(min_length=1, description="Country where the request is made")],
            service_catalogue_id: Annotated[int | None, Field(description="Service catalogue ID (optional)")] = None,
            category_id: Annotated[int | None, Field(description="Category ID (optional)")] = None,
            sub_category_id: Annotated[int | None, Field(description="Sub-category ID (optional)")] = None,
            asset_id: Annotated[int | None, Field(description="Asset ID (optional)")] = None,
            cost_center: Annotated[str | None, Field(description="Cost center (optional)")] = None,
            user_severity_level: Annotated[str | None, Field(description="User severity level (optional)")] = None,
            status: Annotated[str | None, Field(description="Status (optional)")] = None,
            priority: Annotated[str | None, Field(description="Priority (optional)")] = None,
            assigned_to: Annotated[str | None, Field(description="Assigned to (optional)")] = None,
            escalated_to: Annotated[str | None, Field(description="Escalated to (optional)")] = None,
        ) -> str:
            """Update an existing service request.

            The whole record is sent, so pass the current title, justification,
            requester and country along with the fields being changed. Fields left empty are not sent.

            Args:
                ticket_id: Internal ID of the service request (required)
                custom_service_name, business_justification, requested_for, country: Core fields (required)
                status, priority, assigned_to, escalated_to: Workflow fields (optional)

            Returns:
                str: The updated service request as JSON.

            Examples:
                - Use when: "Change the cost center of request 42" -> current core fields plus cost_center
                - Don't use when: Only the priority changes (use itsm_update_service_request_priority)
                - Don't use when: Closing the request (use itsm_close_service_request)

            Error Handling:
                - Returns {"error": "Failed to update service request: 404 Not Found - <backend message>"}
                  when the request does not exist
            """

            def _send() -> Any:
                body = ServiceRequestUpdate(
                    id=ticket_id,
                    custom_service_name=custom_service_name,
                    business_justification=business_justification,
                    requested_for=requested_for,
                    country=country,
                    service_catalogue_id=service_catalogue_id,
                    category_id=category_id,
                    sub_category_id=sub_category_id,
                    asset_id=asset_id,
                    cost_center=cost_center,
                    user_severity_level=user_severity_level,
                    status=status,
                    priority=priority,
                    assigned_to=assigned_to,
                    escalated_to=escalated_to,
                )
                return self.get_client(SERVICE_REQUESTS).update(ticket_id, body)

            outcome = await self._call(_send)
            return outcome.render()

    def _setup_issue_ticket_write_tools(self) -> None:
        """Register issue ticket create/update tools."""

        @self.mcp.tool(
            name="itsm_create_issue_ticket",
            annotations=_write_annotations("Create Issue Ticket"),
        )
        async def itsm_create_issue_ticket(
            issue_title: Annotated[str, Field(min_length=1, description="Title of the issue ticket")],
            issue_description: Annotated[str, Field(min_length=1, description="Detailed description of the issue")],
            requested_for: Annotated[str, Field(min_length=1, description="Email of the person reporting the issue")],
            country: Annotated[str, Field(min_length=1, description="Country where the issue is reported")],
            issue_catalogue_id: Annotated[int | None, Field(description="Issue catalogue ID (optional)")] = None,
            category_id: Annotated[int | None, Field(description="Category ID (optional)")] = None,
            sub_category_id: Annotated[int | None, Field(description="Sub-category ID (optional)")] = None,
            asset_id: Annotated[int | None, Field(description="Asset ID (optional)")] = None,
            cost_center: Annotated[str | None, Field(description="Cost center (optional)")] = None,
            user_severity_level: Annotated[str | None, Field(description="User severity level (optional)")] = None,
        ) -> str:
            """Report a new issue (incident) as an issue ticket.

            Args:
                issue_title: Short summary of the problem (required)
                issue_description: What happened, including error messages (required)
                requested_for: Email of the affected person (required)
                country: Country where the issue is reported (required)
                issue_catalogue_id, category_id, sub_category_id, asset_id: Optional classification IDs
                cost_center, user_severity_level: Optional classification text

            Returns:
                str: The created issue ticket as JSON, with the ID assigned by the backend:

                ```json
                {
                    "id": 21,
                    "issueTitle": "Laptop does not boot",
                    "issueDescription": "Black screen after BIOS logo",
                    "requestedFor": "jane.doe@example.com",
                    "country": "CH",
                    "status": "Open"
                }
                ```

            Examples:
                - Use when: "Jane's laptop won't start" -> issue_title, issue_description, requested_for, country
                - Use when: "The printer on floor 3 is jammed" -> add asset_id if the printer is known
                - Don't use when: Asking for a new service or device (use itsm_create_service_request)

            Error Handling:
                - Returns {"error": "Failed to create issue ticket: 400 Bad Request - <backend message>"}
                  when the backend rejects the ticket
                - Optional fields left empty are not sent
            """

            def _send() -> Any:
                body = IssueTicketCreate(
                    issue_title=issue_title,
                    issue_description=issue_description,
                    requested_for=requested_for,
                    country=country,
                    issue_catalogue_id=issue_catalogue_id,
                    category_id=category_id,
                    sub_category_id=sub_category_id,
                    asset_id=asset_id,
                    cost_center=cost_center,
                    user_severity_level=user_severity_level,
                )
                return self.get_client(ISSUE_TICKETS).create(body)

            outcome = await self._call(_send)
            return outcome.render()

        @self.mcp.tool(
            name="itsm_update_issue_ticket",
            annotations=_idempotent_write_annotations("Update Issue Ticket"),
        )
        async def itsm_update_issue_ticket(
            ticket_id: TicketId,
            issue_title: Annotated[str, Field(min_length=1, description="Title of the issue ticket")],
            issue_description: Annotated[str, Field(min_length=1, description="Detailed description of the issue")],
            requested_for: Annotated[str, Field(min_length=1, description="Email of the person reporting the issue")],
            country: Annotated[str, Field(min_length=1, description="Country where the issue is reported")],
            issue_catalogue_id: Annotated[int | None, Field(description="Issue catalogue ID (optional)")] = None,
            category_id: Annotated[int | None, Field(description="Category ID (optional)")] = None,
            sub_category_id: Annotated[int | None, Field(description="Sub-category ID (optional)")] = None,
            asset_id: Annotated[int | None, Field(description="Asset ID (optional)")] = None,
            cost_center: Annotated[str | None, Field(description="Cost center (optional)")] = None,
            user_severity_level: Annotated[str | None, Field(description="User severity level (optional)")] = None,
            status: Annotated[str | None, Field(description="Status (optional)")] = None,
            priority: Annotated[str | None, Field(description="Priority (optional)")] = None,
            assigned_to: Annotated[str | None, Field(description="Assigned to (optional)")] = None,
            escalated_to: Annotated[str | None, Field(description="Escalated to (optional)")] = None,
        ) -> str:
            """Update an existing issue ticket.

            Pass the current title, description, requester and country along with
            the fields being changed. Fields left empty are not sent.

            Args:
                ticket_id: Internal ID of the issue ticket (required)
                issue_title, issue_description, requested_for, country: Core fields (required)
                status, priority, assigned_to, escalated_to: Workflow fields (optional)

            Returns:
                str: The updated issue ticket as JSON.

            Examples:
                - Use when: "Escalate ticket 21 to Level 2" -> current core fields plus escalated_to
                - Use when: "Add more detail to ticket 21" -> updated issue_description
                - Don't use when: Only reassigning (use itsm_assign_issue_ticket)

            Error Handling:
                - Returns {"error": "Failed to update issue ticket: 404 Not Found - <backend message>"}
                  when the ticket does not exist
            """

            def _send() -> Any:
                body = IssueTicketUpdate(
                    id=ticket_id,
                    issue_title=issue_title,
                    issue_description=issue_description,
                    requested_for=requested_for,
                    country=country,
                    issue_catalogue_id=issue_catalogue_id,
                    category_id=category_id,
                    sub_category_id=sub_category_id,
                    asset_id=asset_id,
                    cost_center=cost_center,
                    user_severity_level=user_severity_level,
                    status=status,
                    priority=priority,
                    assigned_to=assigned_to,
                    escalated_to=escalated_to,
                )
                return self.get_client(ISSUE_TICKETS).update(ticket_id, body)

            outcome = await self._call(_send)
            return outcome.render()

    def _dashboard_summary(self) -> DashboardSummary:
        """Count both ticket kinds; a failing count fails the whole summary."""
        service_request_count = self.get_client(SERVICE_REQUESTS).count()
        issue_ticket_count = self.get_client(ISSUE_TICKETS).count()
        return DashboardSummary(
            service_request_count=service_request_count,
            issue_ticket_count=issue_ticket_count,
            total_tickets=service_request_count + issue_ticket_count,
            generated_at=datetime.now(timezone.utc),
        )

    def _setup_dashboard_tools(self) -> None:
        """Register combined tools."""

        @self.mcp.tool(
            name="itsm_get_dashboard_summary",
            description="Get dashboard summary with counts of both service requests and issue tickets.",
            annotations=_read_only_annotations("Get Dashboard Summary"),
        )
        async def itsm_get_dashboard_summary() -> str:
            outcome = await self._call(self._dashboard_summary)
            return outcome.render()


# Create the server instance with host/port from environment
# This allows HTTP transport to bind to the configured address
_host = os.getenv("MCP_HOST", "127.0.0.1")
_port = int(os.getenv("MCP_PORT", "8000"))
server = ItsmMCPServer(host=_host, port=_port)

# Export the MCP server instance
mcp = server.mcp


# Health check endpoint for HTTP transport
@mcp.custom_route("/health", methods=["GET"])
async def health_check(request: Request) -> JSONResponse:  # noqa: ARG001
    """Health check endpoint for HTTP transport.

    Args:
        request: The incoming HTTP request (required by FastMCP).

    Returns:
        JSONResponse with health status.
    """
    return JSONResponse({"status": "healthy", "transport": "http"})


def _configure_logging() -> None:
    """Configure logging from LOG_LEVEL environment variable.

    Reads LOG_LEVEL environment variable (default: INFO) and configures
    the root logger. Valid values: DEBUG, INFO, WARNING, ERROR, CRITICAL.
    """
    log_level_str = os.getenv("LOG_LEVEL", "INFO").upper()
    valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

    if log_level_str not in valid_levels:
        invalid_level = log_level_str
        log_level_str = "INFO"
        logger.warning(
            "Invalid LOG_LEVEL '%s', defaulting to INFO. Valid values: %s",
            invalid_level,
            ", ".join(sorted(valid_levels)),
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level_str))

    # Add handler if none exists
    if not root_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
        root_logger.addHandler(handler)


def main() -> None:
    """Main entry point for the server."""
    _configure_logging()
    mcp.run()
