"""Google Sheets row store using a service account.

The sheet must be shared with the service account email. Values are read
with FORMATTED_VALUE so dates arrive as the strings shown in the sheet.

Example:
    >>> store = SheetsRowStore(
    ...     spreadsheet_id="1AbC...",
    ...     sheet_name="Tasks",
    ...     key_path="google/service_account_key.json",
    ... )
    >>> header, rows = store.read_rows()
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from todo_sync.exceptions import ConfigurationError, ResultWriteFailed
from todo_sync.rows.base import RowStore

logger = logging.getLogger(__name__)

SHEETS_SCOPE = "https://www.googleapis.com/auth/spreadsheets"


def column_letter(column: int) -> str:
    """Convert a zero-based column index to A1 letters (0 -> A, 26 -> AA)."""
    letters = ""
    column += 1
    while column:
        column, remainder = divmod(column - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters


def a1_cell(sheet_name: str, row: int, column: int) -> str:
    """A1 notation for a zero-based cell on a named sheet."""
    escaped = sheet_name.replace("'", "''")
    return f"'{escaped}'!{column_letter(column)}{row + 1}"


class SheetsRowStore(RowStore):
    """Row store over one sheet of a Google spreadsheet."""

    def __init__(
        self,
        spreadsheet_id: str,
        sheet_name: str = "Tasks",
        key_path: str | Path = "service_account_key.json",
        service: Any = None,
    ):
        """Initialize the store.

        Args:
            spreadsheet_id: Google Sheets spreadsheet ID.
            sheet_name: Sheet (tab) holding the task table.
            key_path: Service account JSON key file.
            service: Prebuilt Sheets API service (skips key loading).

        Raises:
            ConfigurationError: If the spreadsheet ID or key file is missing.
        """
        if not spreadsheet_id:
            raise ConfigurationError(
                "No spreadsheet configured. Set TODO_SYNC_SPREADSHEET_ID."
            )
        self.spreadsheet_id = spreadsheet_id
        self.sheet_name = sheet_name
        self.key_path = Path(key_path)
        self._service = service

    def _get_service(self) -> Any:
        """Get or create the Sheets API service."""
        if self._service is None:
            if not self.key_path.exists():
                raise ConfigurationError(f"Service account key not found at {self.key_path}")
            try:
                credentials = service_account.Credentials.from_service_account_file(
                    str(self.key_path), scopes=[SHEETS_SCOPE]
                )
            except (ValueError, json.JSONDecodeError) as e:
                raise ConfigurationError(f"Invalid service account key: {e}") from e

            logger.info(f"Sheets access as {credentials.service_account_email}")
            self._service = build("sheets", "v4", credentials=credentials)
        return self._service

    def read_table(self) -> list[list[Any]]:
        service = self._get_service()
        escaped = self.sheet_name.replace("'", "''")
        try:
            result = (
                service.spreadsheets()
                .values()
                .get(
                    spreadsheetId=self.spreadsheet_id,
                    range=f"'{escaped}'",
                    valueRenderOption="FORMATTED_VALUE",
                )
                .execute()
            )
        except HttpError as e:
            raise ConfigurationError(f"Cannot read sheet '{self.sheet_name}': {e}") from e
        return result.get("values", [])

    def write_cell(self, row: int, column: int, value: str) -> None:
        service = self._get_service()
        cell = a1_cell(self.sheet_name, row, column)
        try:
            service.spreadsheets().values().update(
                spreadsheetId=self.spreadsheet_id,
                range=cell,
                valueInputOption="RAW",
                body={"values": [[value]]},
            ).execute()
        except HttpError as e:
            raise ResultWriteFailed(cell, str(e)) from e
