"""Credential value and persistence backends.

The credential is a flat mapping of named string fields. Tokens are stored
as opaque strings; nothing here encrypts them.
"""

from __future__ import annotations

import json
import logging
import os
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class Credential:
    """OAuth client configuration and token state."""

    client_id: str = ""
    client_secret: str = ""
    code_verifier: str = ""
    access_token: str = ""
    refresh_token: str = ""
    token_expiry: str = "0"  # epoch milliseconds
    authorization_code: str = ""
    redirect_uri: str = ""
    oauth_state: str = ""
    authorization_url: str = ""

    @property
    def has_tokens(self) -> bool:
        """True only when both access and refresh tokens are present."""
        return bool(self.access_token) and bool(self.refresh_token)

    @property
    def expiry_ms(self) -> int:
        """Token expiry in epoch milliseconds, 0 if never issued."""
        try:
            return int(float(self.token_expiry))
        except (TypeError, ValueError):
            return 0

    @classmethod
    def from_dict(cls, data: dict) -> Credential:
        """Build a Credential, ignoring unknown keys and coercing values to str."""
        known = {f.name for f in fields(cls)}
        values = {k: "" if v is None else str(v) for k, v in data.items() if k in known}
        return cls(**values)

    def to_dict(self) -> dict[str, str]:
        return asdict(self)

    def copy(self) -> Credential:
        return replace(self)


class CredentialStore(ABC):
    """Persistence for a single Credential."""

    @abstractmethod
    def load(self) -> Credential:
        """Load the stored credential (empty Credential if none)."""

    @abstractmethod
    def save(self, credential: Credential) -> None:
        """Persist the credential, overwriting the previous one."""

    def get(self, field: str) -> str:
        return getattr(self.load(), field)

    def set(self, field: str, value: str | int) -> None:
        credential = self.load()
        if not hasattr(credential, field):
            raise KeyError(f"Unknown credential field: {field}")
        setattr(credential, field, str(value))
        self.save(credential)


class MemoryCredentialStore(CredentialStore):
    """In-process credential store."""

    def __init__(self, credential: Credential | None = None):
        self._credential = (credential or Credential()).copy()

    def load(self) -> Credential:
        return self._credential.copy()

    def save(self, credential: Credential) -> None:
        self._credential = credential.copy()


class JsonCredentialStore(CredentialStore):
    """Credential store backed by a JSON file.

    Example:
        >>> store = JsonCredentialStore("microsoft/credential.json")
        >>> credential = store.load()
        >>> credential.client_id = "..."
        >>> store.save(credential)
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> Credential:
        if not self.path.exists():
            logger.info(f"No credential file at {self.path}")
            return Credential()

        with open(self.path) as f:
            data = json.load(f)

        return Credential.from_dict(data)

    def save(self, credential: Credential) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

        # Tokens are written in plain text, so keep the file private
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w") as f:
            json.dump(credential.to_dict(), f, indent=2)

        logger.debug(f"Credential saved to {self.path}")
