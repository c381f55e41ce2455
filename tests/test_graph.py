"""Tests for the To Do client and list resolution."""

import json

import httpx
import pytest
from conftest import GRAPH_URL, Recorder

from todo_sync.exceptions import ApiError, ListNotFound
from todo_sync.graph import ListResolver, TodoClient

LISTS = {
    "value": [
        {"id": "list-1", "displayName": "Tasks", "wellknownListName": "defaultList"},
        {"id": "list-2", "displayName": "Groceries"},
    ]
}


def client_for(recorder):
    return TodoClient(transport=recorder.transport)


class TestTodoClient:
    def test_list_task_lists(self):
        """Should GET /lists with bearer auth and parse the collection."""
        recorder = Recorder(lambda request: httpx.Response(200, json=LISTS))
        with client_for(recorder) as client:
            lists = client.list_task_lists("token-1")

        request = recorder.requests[0]
        assert request.method == "GET"
        assert str(request.url) == f"{GRAPH_URL}/lists"
        assert request.headers["Authorization"] == "Bearer token-1"
        assert [(l.id, l.display_name) for l in lists] == [
            ("list-1", "Tasks"),
            ("list-2", "Groceries"),
        ]

    def test_follows_next_link(self):
        """Should read every page of the collection."""
        next_url = f"{GRAPH_URL}/lists?$skiptoken=abc"

        def respond(request):
            if "skiptoken" in str(request.url):
                return httpx.Response(200, json={"value": [{"id": "list-3", "displayName": "Work"}]})
            return httpx.Response(200, json={**LISTS, "@odata.nextLink": next_url})

        recorder = Recorder(respond)
        lists = client_for(recorder).list_task_lists("token-1")

        assert [l.id for l in lists] == ["list-1", "list-2", "list-3"]
        assert len(recorder.requests) == 2

    def test_create_task(self):
        """Should POST the payload as JSON to the list's tasks."""
        recorder = Recorder(lambda request: httpx.Response(201, json={"id": "task-9"}))
        task = client_for(recorder).create_task("token-1", "list-2", {"title": "Milk"})

        request = recorder.requests[0]
        assert request.method == "POST"
        assert str(request.url) == f"{GRAPH_URL}/lists/list-2/tasks"
        assert json.loads(request.content) == {"title": "Milk"}
        assert task == {"id": "task-9"}

    def test_error_status(self):
        """Non-2xx should raise ApiError with status and body."""
        recorder = Recorder(lambda request: httpx.Response(403, text="Forbidden"))
        with pytest.raises(ApiError) as exc_info:
            client_for(recorder).create_task("token-1", "list-2", {"title": "Milk"})
        assert exc_info.value.status_code == 403
        assert exc_info.value.body == "Forbidden"

    def test_transport_error(self):
        """Network failures should surface as ApiError."""

        def fail(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ApiError) as exc_info:
            client_for(Recorder(fail)).list_task_lists("token-1")
        assert exc_info.value.status_code is None


class TestListResolver:
    def test_exact_match(self):
        recorder = Recorder(lambda request: httpx.Response(200, json=LISTS))
        resolver = ListResolver(client_for(recorder), "token-1")
        assert resolver.resolve("Groceries") == "list-2"

    def test_case_sensitive(self):
        """Names differing only in case should not match."""
        recorder = Recorder(lambda request: httpx.Response(200, json=LISTS))
        resolver = ListResolver(client_for(recorder), "token-1")
        with pytest.raises(ListNotFound) as exc_info:
            resolver.resolve("groceries")
        assert exc_info.value.list_name == "groceries"

    def test_lists_fetched_once(self):
        """Repeated lookups in one batch should reuse the collection."""
        recorder = Recorder(lambda request: httpx.Response(200, json=LISTS))
        resolver = ListResolver(client_for(recorder), "token-1")
        resolver.resolve("Tasks")
        resolver.resolve("Groceries")
        with pytest.raises(ListNotFound):
            resolver.resolve("Missing")
        assert len(recorder.requests) == 1

    def test_failed_fetch_not_cached(self):
        """A failed lookup should be retried on the next resolve."""
        responses = iter([httpx.Response(503, text="busy"), httpx.Response(200, json=LISTS)])
        recorder = Recorder(lambda request: next(responses))
        resolver = ListResolver(client_for(recorder), "token-1")

        with pytest.raises(ApiError):
            resolver.resolve("Tasks")
        assert resolver.resolve("Tasks") == "list-1"
