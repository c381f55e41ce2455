"""Authorization flow variants.

Two kinds of client are supported:

- PkceFlow: public client. The authorization request carries an S256 code
  challenge and the code exchange proves possession of the verifier. No
  client authentication is sent on refresh.
- ClientSecretFlow: confidential client. The shared secret is posted with
  every token endpoint request.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from todo_sync.auth.pkce import generate_pkce_pair
from todo_sync.auth.store import Credential
from todo_sync.exceptions import ConfigurationError, MissingCodeVerifier


class AuthFlow(ABC):
    """Token endpoint behaviour that differs between client types."""

    name: str
    token_endpoint_auth_method: str

    @property
    def client_secret(self) -> str | None:
        return None

    @abstractmethod
    def authorization_params(self, credential: Credential) -> dict[str, Any]:
        """Extra authorization URL parameters. May mutate the credential."""

    @abstractmethod
    def exchange_params(self, credential: Credential) -> dict[str, Any]:
        """Extra authorization_code grant parameters."""

    def after_exchange(self, credential: Credential) -> None:
        """Clean up after a successful code exchange."""


class PkceFlow(AuthFlow):
    name = "pkce"
    token_endpoint_auth_method = "none"

    def authorization_params(self, credential: Credential) -> dict[str, Any]:
        codes = generate_pkce_pair()
        credential.code_verifier = codes.code_verifier
        return {
            "code_challenge": codes.code_challenge,
            "code_challenge_method": "S256",
        }

    def exchange_params(self, credential: Credential) -> dict[str, Any]:
        if not credential.code_verifier:
            raise MissingCodeVerifier()
        return {"code_verifier": credential.code_verifier}

    def after_exchange(self, credential: Credential) -> None:
        # A verifier is single use
        credential.code_verifier = ""


class ClientSecretFlow(AuthFlow):
    name = "client_secret"
    token_endpoint_auth_method = "client_secret_post"

    def __init__(self, client_secret: str):
        if not client_secret:
            raise ConfigurationError("client_secret flow requires a client secret")
        self._client_secret = client_secret

    @property
    def client_secret(self) -> str | None:
        return self._client_secret

    def authorization_params(self, credential: Credential) -> dict[str, Any]:
        return {}

    def exchange_params(self, credential: Credential) -> dict[str, Any]:
        return {}


def build_flow(name: str, credential: Credential) -> AuthFlow:
    """Create the AuthFlow for a configured flow name.

    Args:
        name: "pkce" or "client_secret".
        credential: Stored credential; supplies the client secret.

    Raises:
        ConfigurationError: If the flow is unknown or lacks a secret.
    """
    if name == PkceFlow.name:
        return PkceFlow()
    if name == ClientSecretFlow.name:
        return ClientSecretFlow(credential.client_secret)
    raise ConfigurationError(f"Unknown auth flow: {name}. Use 'pkce' or 'client_secret'.")
