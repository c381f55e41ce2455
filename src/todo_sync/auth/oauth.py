"""Microsoft identity platform OAuth management using Authlib.

This module provides the OAuth 2.0 token lifecycle for Microsoft To Do:
- Authorization URL generation (PKCE or confidential client)
- Authorization code exchange
- Transparent refresh with a 30 second safety margin
- Persistence through a CredentialStore

Credentials are stored in the todo-sync repo by default:
    microsoft/credential.json - client settings and tokens
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

import httpx
from authlib.integrations.httpx_client import OAuth2Client, OAuthError

from todo_sync.auth.flows import AuthFlow, build_flow
from todo_sync.auth.store import Credential, CredentialStore, JsonCredentialStore
from todo_sync.config import DEFAULT_SCOPE, Settings
from todo_sync.exceptions import (
    ConfigurationError,
    CredentialMissing,
    MissingAuthorizationCode,
    TokenExchangeFailed,
    TokenRefreshFailed,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
DEFAULT_EXPIRES_IN = 3600


@dataclass(frozen=True)
class OAuthEndpoints:
    """Authorization server endpoints."""

    authorize_url: str
    token_url: str

    AUTHORITY = "https://login.microsoftonline.com/{tenant}/oauth2/v2.0"

    @classmethod
    def for_tenant(cls, tenant: str = "common") -> OAuthEndpoints:
        base = cls.AUTHORITY.format(tenant=tenant)
        return cls(authorize_url=f"{base}/authorize", token_url=f"{base}/token")


def _raise_for_status(error_class: type[Exception]) -> Callable[[httpx.Response], httpx.Response]:
    """Build an Authlib compliance hook that rejects non-2xx token responses."""

    def hook(response: httpx.Response) -> httpx.Response:
        if not response.is_success:
            response.read()
            raise error_class(response.status_code, response.text)
        return response

    return hook


class TokenManager:
    """Access token acquisition and refresh.

    Example:
        >>> manager = TokenManager.from_settings(load_settings())
        >>> url = manager.generate_authorization_url()
        >>> print(f"Visit: {url}")
        >>> manager.exchange_code_for_token(input("Paste code: "))
        >>> token = manager.get_access_token()
    """

    REFRESH_MARGIN_MS = 30_000

    def __init__(
        self,
        store: CredentialStore,
        flow: AuthFlow,
        scope: str = DEFAULT_SCOPE,
        endpoints: OAuthEndpoints | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize the token manager.

        Args:
            store: Where the credential is read from and written to.
            flow: PKCE or confidential client behaviour.
            scope: Space separated OAuth scopes.
            endpoints: Authorization server endpoints. Defaults to the "common" tenant.
            timeout: Seconds before a token endpoint request is abandoned.
            transport: Optional httpx transport (used by tests).
            clock: Returns the current time in epoch seconds.
        """
        self.store = store
        self.flow = flow
        self.scope = scope
        self.endpoints = endpoints or OAuthEndpoints.for_tenant()
        self.timeout = timeout
        self._transport = transport
        self._clock = clock
        self._lock = threading.Lock()

        self.last_refresh: datetime | None = None
        self.refresh_count = 0

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        store: CredentialStore | None = None,
        **kwargs: Any,
    ) -> TokenManager:
        """Create a manager from Settings, seeding client fields into the store.

        Values present in settings overwrite the stored ones; blank settings
        keep what is already stored.
        """
        store = store or JsonCredentialStore(settings.credential_path)
        credential = store.load()

        seeded = False
        for field, value in (
            ("client_id", settings.client_id),
            ("client_secret", settings.client_secret),
            ("redirect_uri", settings.redirect_uri),
        ):
            if value and getattr(credential, field) != value:
                setattr(credential, field, value)
                seeded = True
        if seeded:
            store.save(credential)

        return cls(
            store=store,
            flow=build_flow(settings.auth_flow, credential),
            scope=settings.scope,
            endpoints=OAuthEndpoints.for_tenant(settings.tenant),
            **kwargs,
        )

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def _session(self, credential: Credential) -> OAuth2Client:
        """Create an Authlib client for one token endpoint interaction."""
        client = OAuth2Client(
            client_id=credential.client_id,
            client_secret=self.flow.client_secret,
            token_endpoint_auth_method=self.flow.token_endpoint_auth_method,
            scope=self.scope,
            redirect_uri=credential.redirect_uri or None,
            timeout=self.timeout,
            transport=self._transport,
        )
        client.register_compliance_hook(
            "access_token_response", _raise_for_status(TokenExchangeFailed)
        )
        client.register_compliance_hook(
            "refresh_token_response", _raise_for_status(TokenRefreshFailed)
        )
        return client

    def needs_refresh(self, credential: Credential) -> bool:
        """Check whether the access token is inside the refresh margin."""
        return self._now_ms() > credential.expiry_ms - self.REFRESH_MARGIN_MS

    def get_access_token(self) -> str:
        """Return a usable access token, refreshing it first if needed.

        Returns:
            The bearer access token.

        Raises:
            CredentialMissing: If no access/refresh token pair is stored.
            TokenRefreshFailed: If the token endpoint rejects the refresh.
        """
        with self._lock:
            credential = self.store.load()
            if not credential.has_tokens:
                raise CredentialMissing()

            if not self.needs_refresh(credential):
                return credential.access_token

            logger.info("Access token expired, refreshing...")
            return self._refresh(credential).access_token

    def _refresh(self, credential: Credential) -> Credential:
        with self._session(credential) as client:
            try:
                token = client.refresh_token(
                    self.endpoints.token_url,
                    refresh_token=credential.refresh_token,
                )
            except OAuthError as e:
                raise TokenRefreshFailed(None, str(e)) from e
            except httpx.HTTPError as e:
                raise TokenRefreshFailed(None, f"Request failed: {e}") from e

        self._save_token(credential, token)
        return credential

    def exchange_code_for_token(self, code: str | None = None) -> Credential:
        """Exchange the stored authorization code for tokens.

        Args:
            code: Authorization code to store before exchanging. If None, the
                previously stored code is used.

        Returns:
            The updated credential.

        Raises:
            MissingAuthorizationCode: If no code is available.
            MissingCodeVerifier: If the PKCE verifier was never recorded.
            TokenExchangeFailed: If the token endpoint rejects the code.
        """
        with self._lock:
            credential = self.store.load()
            if code:
                credential.authorization_code = code
                self.store.save(credential)

            if not credential.authorization_code:
                raise MissingAuthorizationCode()

            params = self.flow.exchange_params(credential)

            with self._session(credential) as client:
                try:
                    token = client.fetch_token(
                        self.endpoints.token_url,
                        grant_type="authorization_code",
                        code=credential.authorization_code,
                        redirect_uri=credential.redirect_uri or None,
                        **params,
                    )
                except OAuthError as e:
                    raise TokenExchangeFailed(None, str(e)) from e
                except httpx.HTTPError as e:
                    raise TokenExchangeFailed(None, f"Request failed: {e}") from e

            self.flow.after_exchange(credential)
            self._save_token(credential, token)
            logger.info("Authorization code exchanged for tokens")
            return credential

    def _save_token(self, credential: Credential, token: dict[str, Any]) -> None:
        """Persist a token endpoint response onto the credential."""
        credential.access_token = token["access_token"]
        # Refresh tokens are not always rotated
        if token.get("refresh_token"):
            credential.refresh_token = token["refresh_token"]

        expires_in = int(token.get("expires_in") or DEFAULT_EXPIRES_IN)
        credential.token_expiry = str(self._now_ms() + expires_in * 1000)
        self.store.save(credential)

        self.last_refresh = datetime.now()
        self.refresh_count += 1
        logger.info(f"Token saved, expires in {expires_in}s")

    def generate_authorization_url(self) -> str:
        """Start the authorization flow.

        For PKCE a new verifier is generated and stored. The URL and the
        state value are stored on the credential as well.

        Returns:
            Authorization URL for the user to visit.

        Raises:
            ConfigurationError: If no client_id is configured.
        """
        credential = self.store.load()
        if not credential.client_id:
            raise ConfigurationError("No client_id configured. Set TODO_SYNC_CLIENT_ID.")

        params = self.flow.authorization_params(credential)
        with self._session(credential) as client:
            url, state = client.create_authorization_url(self.endpoints.authorize_url, **params)

        credential.oauth_state = state
        credential.authorization_url = url
        self.store.save(credential)
        return url

    def forget_tokens(self) -> None:
        """Clear stored tokens, keeping the client configuration."""
        credential = self.store.load()
        credential.access_token = ""
        credential.refresh_token = ""
        credential.token_expiry = "0"
        self.store.save(credential)
        logger.info("Stored tokens cleared")

    def get_token_info(self) -> dict[str, Any]:
        """Get information about the current token.

        Returns:
            Dictionary with token status, expiry, etc.
        """
        credential = self.store.load()
        if not credential.has_tokens:
            return {"status": "no_token"}

        expires_in_ms = credential.expiry_ms - self._now_ms()
        if credential.expiry_ms:
            expires_str = str(timedelta(seconds=max(0, expires_in_ms // 1000)))
        else:
            expires_str = "unknown"

        return {
            "status": "expired" if self.needs_refresh(credential) else "valid",
            "flow": self.flow.name,
            "expires_in": expires_str,
            "has_refresh_token": bool(credential.refresh_token),
            "refresh_count": self.refresh_count,
            "last_refresh": self.last_refresh.isoformat() if self.last_refresh else None,
        }
