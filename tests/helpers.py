"""Test doubles and request inspection helpers shared by the test modules."""

import json
from http import HTTPStatus
from typing import Any
from urllib.parse import parse_qs, urlsplit

import requests
from requests.adapters import BaseAdapter

BASE_URL = "https://itsm.test"
TOKEN = "test-token"


class FakeBackend(BaseAdapter):
    """Transport adapter that answers requests from a route table.

    Unknown routes answer 404 with an empty body.
    """

    def __init__(self) -> None:
        super().__init__()
        self.routes: dict[tuple[str, str], Any] = {}
        self.requests: list[requests.PreparedRequest] = []
        self.send_kwargs: list[dict[str, Any]] = []

    def add(self, method: str, path: str, status: int = 200, json_body: Any = None, raw: str | None = None) -> None:
        if raw is not None:
            content = raw.encode()
        elif json_body is not None:
            content = json.dumps(json_body).encode()
        else:
            content = b""
        self.routes[(method, path)] = (status, content)

    def fail(self, method: str, path: str, error: Exception) -> None:
        self.routes[(method, path)] = error

    def send(self, request: requests.PreparedRequest, **kwargs: Any) -> requests.Response:  # type: ignore[override]
        self.requests.append(request)
        self.send_kwargs.append(kwargs)
        route = self.routes.get((request.method, urlsplit(request.url).path), (404, b""))
        if isinstance(route, Exception):
            raise route
        status, content = route

        response = requests.Response()
        response.status_code = status
        response.reason = HTTPStatus(status).phrase
        response._content = content
        response.encoding = "utf-8"
        response.headers["Content-Type"] = "application/json"
        response.url = request.url
        response.request = request
        return response

    def close(self) -> None:
        pass

    @property
    def last_request(self) -> requests.PreparedRequest:
        return self.requests[-1]

    def paths(self) -> list[str]:
        return [urlsplit(r.url).path for r in self.requests]


def query_of(request: requests.PreparedRequest) -> dict[str, list[str]]:
    """Parsed query string of a captured request."""
    return parse_qs(urlsplit(request.url).query)


def raw_query_of(request: requests.PreparedRequest) -> str:
    return urlsplit(request.url).query


def body_of(request: requests.PreparedRequest) -> dict[str, Any]:
    """Decoded JSON body of a captured request."""
    return json.loads(request.body)
