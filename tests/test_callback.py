"""Tests for the OAuth redirect callback."""

import httpx
import pytest
from conftest import Recorder, form, make_manager

from todo_sync.auth import Credential
from todo_sync.auth.callback import complete_authorization


def token_endpoint(request):
    return httpx.Response(
        200, json={"access_token": "access-2", "refresh_token": "refresh-2", "expires_in": 3600}
    )


@pytest.fixture
def pending():
    return Credential(
        client_id="test-client-id",
        redirect_uri="http://localhost:8765/callback",
        code_verifier="verifier-123",
        oauth_state="state-xyz",
    )


class TestCompleteAuthorization:
    def test_exchanges_code(self, pending):
        """Should exchange the redirect code and report success."""
        recorder = Recorder(token_endpoint)
        manager = make_manager(pending, recorder)

        success, message = complete_authorization(
            manager, {"code": "code-abc", "state": "state-xyz"}
        )

        assert success is True
        assert "complete" in message
        assert form(recorder.requests[0])["code"] == "code-abc"
        assert manager.store.load().has_tokens is True

    def test_provider_error(self, pending):
        manager = make_manager(pending, Recorder(token_endpoint))
        success, message = complete_authorization(
            manager, {"error": "access_denied", "error_description": "User declined"}
        )
        assert success is False
        assert "access_denied" in message

    def test_missing_code(self, pending):
        manager = make_manager(pending, Recorder(token_endpoint))
        success, _ = complete_authorization(manager, {"state": "state-xyz"})
        assert success is False

    def test_state_mismatch(self, pending):
        """Should refuse a redirect carrying a foreign state."""
        recorder = Recorder(token_endpoint)
        manager = make_manager(pending, recorder)

        success, message = complete_authorization(manager, {"code": "c", "state": "other"})

        assert success is False
        assert "state" in message
        assert recorder.requests == []

    def test_exchange_failure_reported(self, pending):
        recorder = Recorder(lambda request: httpx.Response(400, text="invalid_grant"))
        manager = make_manager(pending, recorder)

        success, message = complete_authorization(
            manager, {"code": "code-abc", "state": "state-xyz"}
        )

        assert success is False
        assert "400" in message
