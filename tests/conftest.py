"""Shared fixtures for todo-sync tests."""

from collections.abc import Callable
from urllib.parse import parse_qsl

import httpx
import pytest

from todo_sync.auth import Credential, MemoryCredentialStore, PkceFlow, TokenManager
from todo_sync.auth.oauth import OAuthEndpoints

NOW = 1_750_000_000.0  # epoch seconds
NOW_MS = int(NOW * 1000)

TOKEN_URL = "https://login.microsoftonline.com/common/oauth2/v2.0/token"
GRAPH_URL = "https://graph.microsoft.com/v1.0/me/todo"


def form(request: httpx.Request) -> dict[str, str]:
    """Decode a form-encoded request body."""
    return dict(parse_qsl(request.read().decode()))


class Recorder:
    """MockTransport handler that records requests and delegates responses."""

    def __init__(self, respond: Callable[[httpx.Request], httpx.Response]):
        self.respond = respond
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        return self.respond(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def urls(self) -> list[str]:
        return [str(r.url) for r in self.requests]


@pytest.fixture
def valid_credential():
    """Credential whose access token is good for another hour."""
    return Credential(
        client_id="test-client-id",
        redirect_uri="http://localhost:8765/callback",
        access_token="access-1",
        refresh_token="refresh-1",
        token_expiry=str(NOW_MS + 3_600_000),
    )


@pytest.fixture
def expired_credential(valid_credential):
    """Credential whose access token expired a minute ago."""
    valid_credential.token_expiry = str(NOW_MS - 60_000)
    return valid_credential


def make_manager(credential, recorder, flow=None):
    """TokenManager over an in-memory store, mock transport and frozen clock."""
    return TokenManager(
        MemoryCredentialStore(credential),
        flow or PkceFlow(),
        endpoints=OAuthEndpoints.for_tenant("common"),
        transport=recorder.transport,
        clock=lambda: NOW,
    )
