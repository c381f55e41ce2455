"""Microsoft OAuth token lifecycle."""

from todo_sync.auth.flows import AuthFlow, ClientSecretFlow, PkceFlow, build_flow
from todo_sync.auth.oauth import OAuthEndpoints, TokenManager
from todo_sync.auth.pkce import PkceCodes, generate_challenge, generate_verifier
from todo_sync.auth.store import (
    Credential,
    CredentialStore,
    JsonCredentialStore,
    MemoryCredentialStore,
)

__all__ = [
    "TokenManager",
    "OAuthEndpoints",
    "AuthFlow",
    "PkceFlow",
    "ClientSecretFlow",
    "build_flow",
    "Credential",
    "CredentialStore",
    "JsonCredentialStore",
    "MemoryCredentialStore",
    "PkceCodes",
    "generate_verifier",
    "generate_challenge",
]
