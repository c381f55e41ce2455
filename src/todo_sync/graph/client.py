"""Microsoft To Do (Graph) API client."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from todo_sync.exceptions import ApiError

logger = logging.getLogger(__name__)


@dataclass
class TodoList:
    """Represents a Microsoft To Do list."""

    id: str
    display_name: str


class TodoClient:
    """Microsoft To Do client over httpx.

    Every call takes the bearer token explicitly; token lifecycle belongs to
    TokenManager.

    Example:
        >>> with TodoClient() as client:
        ...     lists = client.list_task_lists(token)
        ...     client.create_task(token, lists[0].id, {"title": "Buy milk"})
    """

    BASE_URL = "https://graph.microsoft.com/v1.0/me/todo"

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            base_url: To Do API root. Defaults to the Graph v1.0 endpoint.
            timeout: Per-request timeout in seconds.
            transport: Optional httpx transport (used by tests).
        """
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self._client = httpx.Client(timeout=timeout, transport=transport)

    def _get_headers(self, access_token: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
        }

    def _request(
        self,
        method: str,
        url: str,
        access_token: str,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Make an authenticated API request.

        Args:
            method: HTTP method.
            url: Endpoint path (e.g. "/lists") or an absolute URL.
            access_token: Bearer token.
            json: JSON body for POST.

        Returns:
            Decoded response body.

        Raises:
            ApiError: If the request fails or returns a non-2xx status.
        """
        if not url.startswith("http"):
            url = f"{self.base_url}{url}"

        try:
            response = self._client.request(
                method, url, headers=self._get_headers(access_token), json=json
            )
        except httpx.HTTPError as e:
            raise ApiError(None, f"Request failed: {e}") from e

        if not response.is_success:
            raise ApiError(response.status_code, response.text)

        if not response.content:
            return {}
        return response.json()

    def list_task_lists(self, access_token: str) -> list[TodoList]:
        """List all To Do lists, following @odata.nextLink pages.

        Returns:
            List of TodoList objects.
        """
        lists: list[TodoList] = []
        url: str | None = "/lists"
        while url:
            data = self._request("GET", url, access_token)
            lists.extend(self._parse_list(item) for item in data.get("value", []))
            url = data.get("@odata.nextLink")

        logger.debug(f"Fetched {len(lists)} To Do lists")
        return lists

    def create_task(
        self, access_token: str, list_id: str, payload: dict[str, Any]
    ) -> dict[str, Any]:
        """Create a task in a list.

        Args:
            access_token: Bearer token.
            list_id: Target list ID.
            payload: todoTask JSON body.

        Returns:
            The created task resource.
        """
        return self._request("POST", f"/lists/{list_id}/tasks", access_token, json=payload)

    def _parse_list(self, data: dict) -> TodoList:
        return TodoList(
            id=data["id"],
            display_name=data.get("displayName", ""),
        )

    def close(self):
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
