"""Bearer token authentication for backend requests."""

import requests
from requests.auth import AuthBase

from .config import ItsmConfig


class BearerTokenAuth(AuthBase):
    """Attach a static bearer token to every outgoing request.

    There is no refresh or expiry handling; one token serves the whole process.
    """

    def __init__(self, token: str) -> None:
        self._token = token

    @classmethod
    def from_config(cls, config: ItsmConfig) -> "BearerTokenAuth":
        return cls(config.bearer_token)

    @property
    def token(self) -> str:
        """The configured token, for diagnostics only."""
        return self._token

    def configure_session(self, session: requests.Session) -> requests.Session:
        """Install this authenticator on a session and return it."""
        session.auth = self
        return session

    def __call__(self, r: requests.PreparedRequest) -> requests.PreparedRequest:
        r.headers["Authorization"] = f"Bearer {self._token}"
        return r

    def __eq__(self, other: object) -> bool:
        return isinstance(other, BearerTokenAuth) and other._token == self._token

    def __ne__(self, other: object) -> bool:
        return not self == other

    def __repr__(self) -> str:
        return "BearerTokenAuth(token=***)"
