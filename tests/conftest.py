"""Shared fixtures for the ITSM MCP server tests."""

from collections.abc import Callable
from typing import Any

import pytest

from mcp_itsm.client import ISSUE_TICKETS, SERVICE_REQUESTS, TicketClient, create_session
from mcp_itsm.config import ItsmConfig
from mcp_itsm.server import ItsmMCPServer
from tests.helpers import BASE_URL, TOKEN, FakeBackend


@pytest.fixture
def config():
    """Configuration pointing at the fake backend."""
    return ItsmConfig(base_url=f"{BASE_URL}/", bearer_token=TOKEN, timeout=5)


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def session(config, backend):
    """Real authenticated session whose transport is the fake backend."""
    sess = create_session(config)
    sess.mount(BASE_URL, backend)
    yield sess
    sess.close()


@pytest.fixture
def service_request_client(config, session):
    return TicketClient(SERVICE_REQUESTS, config, session)


@pytest.fixture
def issue_ticket_client(config, session):
    return TicketClient(ISSUE_TICKETS, config, session)


@pytest.fixture
def server_instance(config, session, service_request_client, issue_ticket_client):
    """Server with clients wired to the fake backend, as after initialize()."""
    server_inst = ItsmMCPServer()
    server_inst.config = config
    server_inst.session = session
    server_inst.clients = {
        SERVICE_REQUESTS.resource: service_request_client,
        ISSUE_TICKETS.resource: issue_ticket_client,
    }
    return server_inst


@pytest.fixture
def tool(server_instance) -> Callable[[str], Callable[..., Any]]:
    """Look up the raw coroutine function registered for a tool name."""

    def _get(name: str) -> Callable[..., Any]:
        registered = server_instance.mcp._tool_manager.get_tool(name)
        assert registered is not None, f"tool {name} not registered"
        return registered.fn

    return _get


@pytest.fixture
def issue_ticket_factory():
    """Factory fixture to create issue ticket payloads with custom values."""

    def _make(**kwargs):
        base = {
            "id": 1,
            "issueTitle": "Laptop does not boot",
            "issueDescription": "Black screen after BIOS logo",
            "requestedFor": "jane.doe@example.com",
            "country": "CH",
            "status": "Open",
            "priority": "High",
        }
        base.update(kwargs)
        return base

    return _make


@pytest.fixture
def service_request_factory():
    """Factory fixture to create service request payloads with custom values."""

    def _make(**kwargs):
        base = {
            "id": 1,
            "customServiceName": "New monitor",
            "businessJustification": "Second screen for design work",
            "requestedFor": "john.roe@example.com",
            "country": "DE",
            "status": "Open",
            "priority": "Medium",
        }
        base.update(kwargs)
        return base

    return _make
