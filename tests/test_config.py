"""Tests for configuration loading."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from todo_sync.config import Settings, _load_env_file, get_config_status, load_settings
from todo_sync.exceptions import ConfigurationError


class TestLoadSettings:
    def test_defaults(self):
        """Should fall back to defaults with an empty environment."""
        with patch.dict(os.environ, {}, clear=True):
            settings = load_settings()
        assert settings.auth_flow == "pkce"
        assert settings.tenant == "common"
        assert settings.timezone == "UTC"
        assert settings.due_encoding == "local"
        assert "offline_access" in settings.scope

    def test_from_env(self):
        env = {
            "TODO_SYNC_CLIENT_ID": "cid",
            "TODO_SYNC_CLIENT_SECRET": "secret",
            "TODO_SYNC_AUTH_FLOW": "CLIENT_SECRET",
            "TODO_SYNC_TIMEZONE": "Asia/Tokyo",
            "TODO_SYNC_DUE_ENCODING": "utc",
            "TODO_SYNC_CREDENTIAL_PATH": "/tmp/cred.json",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = load_settings()
        assert settings.client_id == "cid"
        assert settings.auth_flow == "client_secret"
        assert settings.timezone == "Asia/Tokyo"
        assert settings.due_encoding == "utc"
        assert settings.credential_path == Path("/tmp/cred.json")

    @pytest.mark.parametrize(
        "overrides",
        [{"timezone": "Mars/Olympus"}, {"auth_flow": "implicit"}, {"due_encoding": "naive"}],
    )
    def test_invalid_values(self, overrides):
        with pytest.raises(ConfigurationError):
            Settings(**overrides)


class TestEnvFile:
    def test_load_env_file(self, tmp_path):
        """Should parse KEY=value lines, strip quotes and skip comments."""
        env_path = tmp_path / ".env"
        env_path.write_text(
            "# comment\nTODO_SYNC_TENANT='consumers'\nTODO_SYNC_SHEET_NAME=\"Inbox\"\nnoise\n"
        )
        with patch.dict(os.environ, {}, clear=True):
            loaded = _load_env_file(env_path)
            assert os.environ["TODO_SYNC_TENANT"] == "consumers"
        assert loaded == {"TODO_SYNC_TENANT": "consumers", "TODO_SYNC_SHEET_NAME": "Inbox"}

    def test_existing_env_wins(self, tmp_path):
        env_path = tmp_path / ".env"
        env_path.write_text("TODO_SYNC_TENANT=consumers\n")
        with patch.dict(os.environ, {"TODO_SYNC_TENANT": "organizations"}, clear=True):
            loaded = _load_env_file(env_path)
            assert os.environ["TODO_SYNC_TENANT"] == "organizations"
        assert loaded == {}

    def test_missing_file(self, tmp_path):
        assert _load_env_file(tmp_path / "missing.env") == {}


class TestConfigStatus:
    def test_status_keys(self, tmp_path):
        env = {
            "TODO_SYNC_CLIENT_ID": "cid",
            "TODO_SYNC_CREDENTIAL_PATH": str(tmp_path / "credential.json"),
        }
        with patch.dict(os.environ, env, clear=True):
            status = get_config_status()
        assert status["microsoft"]["client_id"] is True
        assert status["microsoft"]["client_secret"] is False
        assert status["microsoft"]["credential"] is False
        assert "service_account" in status["google"]
