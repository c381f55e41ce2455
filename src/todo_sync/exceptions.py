"""todo-sync exceptions."""

from __future__ import annotations


class TodoSyncError(Exception):
    """Base exception for todo-sync errors."""

    pass


class ConfigurationError(TodoSyncError):
    """Raised when settings or the row store structure are unusable."""

    pass


# =============================================================================
# Authorization
# =============================================================================


class AuthError(TodoSyncError):
    """Base exception for OAuth errors."""

    pass


class CredentialMissing(AuthError):
    """Raised when no access/refresh token pair is stored."""

    def __init__(self, message: str | None = None):
        super().__init__(
            message
            or "No access token stored. Run 'todo-sync auth login' to authorize."
        )


class TokenRefreshFailed(AuthError):
    """Raised when the token endpoint rejects a refresh request."""

    def __init__(self, status_code: int | None, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Token refresh failed ({status_code}): {body}")


class TokenExchangeFailed(AuthError):
    """Raised when the authorization code cannot be exchanged for tokens."""

    def __init__(self, status_code: int | None, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Authorization code exchange failed ({status_code}): {body}")


class MissingAuthorizationCode(AuthError):
    """Raised when no authorization code is stored."""

    def __init__(self):
        super().__init__("No authorization code stored. Complete the authorization step first.")


class MissingCodeVerifier(AuthError):
    """Raised when the PKCE flow has no verifier recorded."""

    def __init__(self):
        super().__init__(
            "No PKCE code verifier stored. Generate the authorization URL first."
        )


# =============================================================================
# Per-row errors
# =============================================================================


class RowError(TodoSyncError):
    """Base exception for failures confined to a single row."""

    pass


class InvalidDueDate(RowError):
    """Raised when a due date cannot be parsed."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"invalid due date: {value}")


class InvalidReminderDate(RowError):
    """Raised when a reminder datetime cannot be parsed."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"invalid reminder date: {value}")


class InvalidRecurrenceDate(RowError):
    """Raised when a recurrence start or end date cannot be parsed."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"invalid recurrence date: {value}")


class ListNotFound(RowError):
    """Raised when no To Do list has the requested display name."""

    def __init__(self, list_name: str):
        self.list_name = list_name
        super().__init__(f"list not found: {list_name}")


class ApiError(RowError):
    """Raised when Microsoft Graph returns an error."""

    def __init__(self, status_code: int | None, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"API error ({status_code}): {body}")


# =============================================================================
# Row store
# =============================================================================


class ResultWriteFailed(TodoSyncError):
    """Raised when a row store cannot record a result."""

    def __init__(self, location: str, reason: str):
        self.location = location
        self.reason = reason
        super().__init__(f"Cannot write result to {location}: {reason}")
