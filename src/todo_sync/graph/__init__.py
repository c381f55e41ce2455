"""Microsoft To Do (Graph) access.

Usage:
    from todo_sync.graph import ListResolver, TodoClient

    with TodoClient() as client:
        resolver = ListResolver(client, access_token)
        list_id = resolver.resolve("Groceries")
        client.create_task(access_token, list_id, {"title": "Buy milk"})
"""

from __future__ import annotations

from todo_sync.graph.client import TodoClient, TodoList
from todo_sync.graph.lists import ListResolver

__all__ = ["TodoClient", "TodoList", "ListResolver"]
