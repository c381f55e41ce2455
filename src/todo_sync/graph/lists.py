"""List name to list ID resolution."""

from __future__ import annotations

from todo_sync.exceptions import ListNotFound
from todo_sync.graph.client import TodoClient, TodoList


class ListResolver:
    """Resolve display names to list IDs for the duration of one batch.

    The list collection is fetched on first use and reused afterwards, since
    list identity does not change mid-batch. Create a new resolver per batch.
    """

    def __init__(self, client: TodoClient, access_token: str):
        self._client = client
        self._access_token = access_token
        self._lists: list[TodoList] | None = None

    def resolve(self, list_name: str) -> str:
        """Return the ID of the list whose display name equals list_name.

        Matching is exact and case-sensitive.

        Raises:
            ListNotFound: If no list matches.
            ApiError: If the lists request fails.
        """
        if self._lists is None:
            self._lists = self._client.list_task_lists(self._access_token)

        for todo_list in self._lists:
            if todo_list.display_name == list_name:
                return todo_list.id
        raise ListNotFound(list_name)
