"""Centralized configuration.

Credentials and settings live in the todo-sync repo root:
    .env                              - TODO_SYNC_* settings
    microsoft/credential.json         - OAuth client + token state
    google/service_account_key.json   - Google service account key (Sheets)

This module auto-loads the .env file on import. Environment variables that
are already set take precedence over values in the file.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import dotenv_values

from todo_sync.exceptions import ConfigurationError

# Repository root (where this package is installed from)
# __file__ is src/todo_sync/config.py, so 3 levels up
REPO_ROOT = Path(__file__).parent.parent.parent
MICROSOFT_DIR = REPO_ROOT / "microsoft"
GOOGLE_DIR = REPO_ROOT / "google"

ENV_FILE = REPO_ROOT / ".env"
CREDENTIAL_FILE = MICROSOFT_DIR / "credential.json"
GOOGLE_SERVICE_ACCOUNT = GOOGLE_DIR / "service_account_key.json"

AUTH_FLOWS = ("pkce", "client_secret")
DUE_ENCODINGS = ("local", "utc")

DEFAULT_REDIRECT_URI = "http://localhost:8765/callback"
DEFAULT_SCOPE = "offline_access Tasks.ReadWrite"


def _load_env_file(env_path: Path) -> dict[str, str]:
    """Export .env values that are not already set in the environment.

    Args:
        env_path: Path to .env file.

    Returns:
        Dictionary of the variables that were exported.
    """
    if not env_path.exists():
        return {}

    loaded = {
        key: value
        for key, value in dotenv_values(env_path).items()
        if value is not None and key not in os.environ
    }
    os.environ.update(loaded)
    return loaded


@dataclass
class Settings:
    """Runtime settings resolved from the environment."""

    client_id: str = ""
    client_secret: str = ""
    auth_flow: str = "pkce"
    tenant: str = "common"
    redirect_uri: str = DEFAULT_REDIRECT_URI
    scope: str = DEFAULT_SCOPE
    timezone: str = "UTC"
    due_encoding: str = "local"
    spreadsheet_id: str = ""
    sheet_name: str = "Tasks"
    credential_path: Path = CREDENTIAL_FILE
    service_account_key: Path = GOOGLE_SERVICE_ACCOUNT

    def __post_init__(self) -> None:
        if self.auth_flow not in AUTH_FLOWS:
            raise ConfigurationError(
                f"Unknown auth flow: {self.auth_flow}. Use one of: {list(AUTH_FLOWS)}"
            )
        if self.due_encoding not in DUE_ENCODINGS:
            raise ConfigurationError(
                f"Unknown due encoding: {self.due_encoding}. Use one of: {list(DUE_ENCODINGS)}"
            )
        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigurationError(f"Unknown timezone: {self.timezone}") from e


def load_settings() -> Settings:
    """Build Settings from TODO_SYNC_* environment variables.

    Raises:
        ConfigurationError: If a value is out of range.
    """
    env = os.environ
    return Settings(
        client_id=env.get("TODO_SYNC_CLIENT_ID", ""),
        client_secret=env.get("TODO_SYNC_CLIENT_SECRET", ""),
        auth_flow=env.get("TODO_SYNC_AUTH_FLOW", "pkce").strip().lower(),
        tenant=env.get("TODO_SYNC_TENANT", "common"),
        redirect_uri=env.get("TODO_SYNC_REDIRECT_URI", DEFAULT_REDIRECT_URI),
        scope=env.get("TODO_SYNC_SCOPE", DEFAULT_SCOPE),
        timezone=env.get("TODO_SYNC_TIMEZONE", "UTC"),
        due_encoding=env.get("TODO_SYNC_DUE_ENCODING", "local").strip().lower(),
        spreadsheet_id=env.get("TODO_SYNC_SPREADSHEET_ID", ""),
        sheet_name=env.get("TODO_SYNC_SHEET_NAME", "Tasks"),
        credential_path=Path(env.get("TODO_SYNC_CREDENTIAL_PATH", CREDENTIAL_FILE)),
        service_account_key=Path(env.get("GOOGLE_SERVICE_ACCOUNT_KEY", GOOGLE_SERVICE_ACCOUNT)),
    )


def ensure_data_dirs() -> Path:
    """Create the credential directories if they don't exist.

    Returns:
        Path to the microsoft credential directory.
    """
    MICROSOFT_DIR.mkdir(parents=True, exist_ok=True)
    GOOGLE_DIR.mkdir(parents=True, exist_ok=True)
    return MICROSOFT_DIR


def get_config_status() -> dict:
    """Get status of all configured settings and credential files."""
    return {
        "repo_root": str(REPO_ROOT),
        "env_file": ENV_FILE.exists(),
        "microsoft": {
            "client_id": bool(os.environ.get("TODO_SYNC_CLIENT_ID")),
            "client_secret": bool(os.environ.get("TODO_SYNC_CLIENT_SECRET")),
            "credential": Path(os.environ.get("TODO_SYNC_CREDENTIAL_PATH", CREDENTIAL_FILE)).exists(),
        },
        "google": {
            "service_account": Path(
                os.environ.get("GOOGLE_SERVICE_ACCOUNT_KEY", GOOGLE_SERVICE_ACCOUNT)
            ).exists(),
            "spreadsheet_id": bool(os.environ.get("TODO_SYNC_SPREADSHEET_ID")),
        },
    }


# Auto-load .env from repo root on import
_loaded = _load_env_file(ENV_FILE)
