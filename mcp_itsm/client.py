"""REST client for the ITSM backend.

One ``TicketClient`` class serves both ticket kinds. A ``TicketKind`` carries
everything that differs between them: endpoint paths, display names and the
model used to decode records.
"""

import logging
from dataclasses import dataclass
from typing import Any, Generic, TypeVar
from urllib.parse import quote, urlencode

import requests
from pydantic import TypeAdapter, ValidationError

from .auth import BearerTokenAuth
from .config import ItsmConfig
from .models import (
    AssignTicketRequest,
    CloseTicketRequest,
    CountResponse,
    IssueTicket,
    PriorityChangeRequest,
    ServiceRequest,
    TicketRecord,
    WireModel,
)

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=TicketRecord)

HTTP_NOT_FOUND = 404


class ItsmError(Exception):
    """Base class for failures talking to the ITSM backend."""


class ItsmRequestError(ItsmError):
    """The backend answered with a non-success status.

    Attributes:
        status_code: HTTP status returned by the backend
        body: Response body text, when the operation reports it
    """

    def __init__(self, action: str, status_code: int, reason: str | None = None, body: str | None = None) -> None:
        self.status_code = status_code
        self.body = body
        status = f"{status_code} {reason}" if reason else str(status_code)
        message = f"Failed to {action}: {status}"
        if body:
            message += f" - {body}"
        super().__init__(message)


class ItsmDecodeError(ItsmError):
    """The backend answered with success but the body could not be decoded."""


class ItsmTransportError(ItsmError):
    """The request never produced a response (connection error, timeout)."""


@dataclass(frozen=True)
class TicketKind(Generic[RecordT]):
    """Capability set that parameterizes ``TicketClient`` for one ticket kind.

    Attributes:
        resource: Backend controller name, e.g. ``ServiceRequest``
        singular: Human-readable name, e.g. ``service request``
        plural: Human-readable plural
        detail_template: Path of the get-by-id endpoint with an ``{id}`` placeholder
        record_model: Model for records returned by the backend
    """

    resource: str
    singular: str
    plural: str
    detail_template: str
    record_model: type[RecordT]

    @property
    def base_path(self) -> str:
        return f"/api/{self.resource}"

    @property
    def slug(self) -> str:
        """Singular name for tool identifiers, e.g. ``service_request``."""
        return self.singular.replace(" ", "_")

    @property
    def slug_plural(self) -> str:
        return self.plural.replace(" ", "_")

    @property
    def not_found_message(self) -> str:
        return f"{self.singular.capitalize()} not found"

    def detail_path(self, ticket_id: int) -> str:
        return self.detail_template.format(id=ticket_id)

    def asset_path(self, asset_id: int) -> str:
        return f"{self.base_path}/Get{self.resource}ByAsset/{asset_id}"


SERVICE_REQUESTS: TicketKind[ServiceRequest] = TicketKind(
    resource="ServiceRequest",
    singular="service request",
    plural="service requests",
    detail_template="/api/ServiceRequest/{id}",
    record_model=ServiceRequest,
)

ISSUE_TICKETS: TicketKind[IssueTicket] = TicketKind(
    resource="IssueTicket",
    singular="issue ticket",
    plural="issue tickets",
    detail_template="/api/IssueTicket/GetById/{id}",
    record_model=IssueTicket,
)


def create_session(config: ItsmConfig) -> requests.Session:
    """Create the pooled session shared by all ticket clients."""
    session = requests.Session()
    session.headers.update({"Accept": "application/json"})
    return BearerTokenAuth.from_config(config).configure_session(session)


def _flag(value: bool) -> str:
    return "true" if value else "false"


class TicketClient(Generic[RecordT]):
    """Client for one ticket kind of the ITSM backend.

    Every method issues exactly one HTTP request. List methods return an empty
    list when the backend sends nothing; ``get`` returns ``None`` on 404; all
    other failures raise an ``ItsmError`` subclass.
    """

    def __init__(self, kind: TicketKind[RecordT], config: ItsmConfig, session: requests.Session) -> None:
        self.kind = kind
        self._config = config
        self._session = session
        self._list_adapter = TypeAdapter(list[kind.record_model])  # type: ignore[name-defined]

    # ---- transport ----

    def _request(
        self,
        method: str,
        path: str,
        action: str,
        *,
        params: dict[str, str] | None = None,
        body: WireModel | None = None,
    ) -> requests.Response:
        url = f"{self._config.base_url}{path}"
        if params:
            # Percent-escape values (%20 for spaces, not form-style +)
            url = f"{url}?{urlencode(params, quote_via=quote)}"
        logger.debug("%s %s", method, url)
        try:
            return self._session.request(
                method,
                url,
                json=body.to_wire() if body is not None else None,
                timeout=self._config.timeout,
            )
        except requests.RequestException as e:
            logger.warning("Request to %s failed: %s", url, e)
            raise ItsmTransportError(f"Failed to {action}: {e}") from e

    @staticmethod
    def _check_status(response: requests.Response, action: str, *, include_body: bool = False) -> None:
        if 200 <= response.status_code < 300:
            return
        body = response.text if include_body else None
        logger.warning("Backend returned %s while trying to %s", response.status_code, action)
        raise ItsmRequestError(action, response.status_code, response.reason, body)

    @staticmethod
    def _payload(response: requests.Response, action: str) -> Any:
        """Parse the JSON body, returning ``None`` for an empty body."""
        if not response.content or not response.content.strip():
            return None
        try:
            return response.json()
        except (ValueError, RecursionError) as e:
            raise ItsmDecodeError(f"Failed to {action}: response is not valid JSON") from e

    def _decode_list(self, response: requests.Response, action: str) -> list[RecordT]:
        payload = self._payload(response, action)
        if payload is None:
            return []
        try:
            return self._list_adapter.validate_python(payload)
        except ValidationError as e:
            raise ItsmDecodeError(f"Failed to {action}: unexpected response shape ({e.error_count()} errors)") from e

    def _decode_record(self, response: requests.Response, action: str) -> RecordT:
        payload = self._payload(response, action)
        if payload is None:
            raise ItsmDecodeError(f"Failed to {action}: empty response")
        try:
            return self.kind.record_model.model_validate(payload)
        except ValidationError as e:
            raise ItsmDecodeError(f"Failed to {action}: unexpected response shape ({e.error_count()} errors)") from e

    def _get_list(self, path: str, action: str, params: dict[str, str] | None = None) -> list[RecordT]:
        response = self._request("GET", path, action, params=params)
        self._check_status(response, action)
        return self._decode_list(response, action)

    # ---- operations ----

    def list_all(self) -> list[RecordT]:
        """Get every ticket of this kind."""
        return self._get_list(f"{self.kind.base_path}/GetAll", f"get {self.kind.plural}")

    def list_filtered(
        self, is_my_tickets: bool = False, is_history: bool = False, is_assigned_to_me: bool = False
    ) -> list[RecordT]:
        """Get tickets filtered by the caller's context (mine, history, assigned to me)."""
        params = {
            "isMyTickets": _flag(is_my_tickets),
            "isHistory": _flag(is_history),
            "isAssignedToMe": _flag(is_assigned_to_me),
        }
        return self._get_list(f"{self.kind.base_path}/GetTickets", f"get {self.kind.singular} tickets", params)

    def get(self, ticket_id: int) -> RecordT | None:
        """Get one ticket, or ``None`` if the backend reports 404."""
        action = f"get {self.kind.singular}"
        response = self._request("GET", self.kind.detail_path(ticket_id), action)
        if response.status_code == HTTP_NOT_FOUND:
            logger.debug("%s %s not found", self.kind.singular, ticket_id)
            return None
        self._check_status(response, action)
        return self._decode_record(response, action)

    def list_by_asset(self, asset_id: int) -> list[RecordT]:
        return self._get_list(self.kind.asset_path(asset_id), f"get {self.kind.plural} for asset")

    def create(self, body: WireModel) -> RecordT:
        """Create a ticket; the backend assigns its id."""
        action = f"create {self.kind.singular}"
        response = self._request("POST", f"{self.kind.base_path}/Create{self.kind.resource}", action, body=body)
        self._check_status(response, action, include_body=True)
        return self._decode_record(response, action)

    def update(self, ticket_id: int, body: WireModel) -> RecordT:
        action = f"update {self.kind.singular}"
        path = f"{self.kind.base_path}/Update{self.kind.resource}/{ticket_id}"
        response = self._request("PUT", path, action, body=body)
        self._check_status(response, action, include_body=True)
        return self._decode_record(response, action)

    def close(self, ticket_id: int, resolution: str, closure_notes: str | None = None) -> RecordT:
        action = f"close {self.kind.singular}"
        body = CloseTicketRequest(id=ticket_id, resolution=resolution, closure_notes=closure_notes)
        response = self._request("POST", f"{self.kind.base_path}/{ticket_id}/Close", action, body=body)
        self._check_status(response, action)
        return self._decode_record(response, action)

    def assign(self, ticket_id: int, assigned_to: str, assignment_notes: str | None = None) -> RecordT:
        action = f"assign {self.kind.singular}"
        body = AssignTicketRequest(id=ticket_id, assigned_to=assigned_to, assignment_notes=assignment_notes)
        response = self._request("POST", f"{self.kind.base_path}/{ticket_id}/Assign", action, body=body)
        self._check_status(response, action)
        return self._decode_record(response, action)

    def change_priority(self, ticket_id: int, priority: str, reason: str) -> RecordT:
        action = f"update {self.kind.singular} priority"
        body = PriorityChangeRequest(id=ticket_id, priority=priority, reason=reason)
        response = self._request("POST", f"{self.kind.base_path}/{ticket_id}/UpdatePriority", action, body=body)
        self._check_status(response, action)
        return self._decode_record(response, action)

    def count(self) -> int:
        """Get the total number of tickets; 0 when the backend omits the count."""
        action = f"get {self.kind.singular} count"
        response = self._request("GET", self.kind.base_path, action, params={"count": "true"})
        self._check_status(response, action)
        payload = self._payload(response, action)
        if not isinstance(payload, dict):
            return 0
        try:
            return CountResponse.model_validate(payload).count
        except ValidationError as e:
            raise ItsmDecodeError(f"Failed to {action}: count is not an integer") from e

    def search(
        self,
        query: str,
        status: str | None = None,
        priority: str | None = None,
        assigned_to: str | None = None,
    ) -> list[RecordT]:
        """Full-text search; empty filters are left out of the query string."""
        params = {"searchQuery": query}
        filters = {"status": status, "priority": priority, "assignedTo": assigned_to}
        params.update({name: value for name, value in filters.items() if value})
        return self._get_list(f"{self.kind.base_path}/Search", f"search {self.kind.plural}", params)

    def list_by_status(self, status: str) -> list[RecordT]:
        return self._get_list(
            f"{self.kind.base_path}/ByStatus", f"get {self.kind.plural} by status", {"status": status}
        )

    def list_by_priority(self, priority: str) -> list[RecordT]:
        return self._get_list(
            f"{self.kind.base_path}/ByPriority", f"get {self.kind.plural} by priority", {"priority": priority}
        )
