"""Tests for the todo-sync CLI."""

import os
from unittest.mock import patch

import pytest

from todo_sync.cli import main


@pytest.fixture
def env(tmp_path):
    """Isolated environment with a private credential file."""
    values = {
        "TODO_SYNC_CLIENT_ID": "test-client-id",
        "TODO_SYNC_CREDENTIAL_PATH": str(tmp_path / "credential.json"),
    }
    with patch.dict(os.environ, values, clear=True):
        yield tmp_path


class TestCli:
    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "todo-sync" in capsys.readouterr().out

    def test_status(self, env, capsys):
        assert main(["status"]) == 0
        assert "Microsoft:" in capsys.readouterr().out

    def test_auth_status_without_token(self, env, capsys):
        assert main(["auth", "status"]) == 1
        assert "No token found" in capsys.readouterr().out

    def test_auth_url(self, env, capsys):
        """Should print a PKCE authorization URL and store the verifier."""
        assert main(["auth", "url"]) == 0
        out = capsys.readouterr().out
        assert "client_id=test-client-id" in out
        assert "code_challenge=" in out
        assert (env / "credential.json").exists()

    def test_auth_exchange_without_verifier(self, env, capsys):
        assert main(["auth", "exchange", "code-abc"]) == 1
        assert "verifier" in capsys.readouterr().out

    def test_sync_aborts_without_token(self, env, capsys):
        """A sync without stored tokens should fail without touching the CSV."""
        path = env / "tasks.csv"
        path.write_text("title,list_name,result\nMilk,Groceries,\n")

        assert main(["sync", "--csv", str(path)]) == 1
        assert "Sync aborted" in capsys.readouterr().out
        assert path.read_text() == "title,list_name,result\nMilk,Groceries,\n"
