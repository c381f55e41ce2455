"""Batch synchronization of task rows to Microsoft To Do."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

from todo_sync.exceptions import AuthError, ConfigurationError, RowError
from todo_sync.graph.client import TodoClient
from todo_sync.graph.lists import ListResolver
from todo_sync.rows.base import RowStore, TaskRow
from todo_sync.sync.outcomes import BatchReport, Failed, Skipped, Succeeded, SyncOutcome
from todo_sync.sync.payload import DueEncoding, PayloadBuilder

logger = logging.getLogger(__name__)

Notifier = Callable[[str], None]


class AccessTokenProvider(Protocol):
    def get_access_token(self) -> str: ...


def _log_notifier(message: str) -> None:
    logger.info(message)


class SyncEngine:
    """Register every row of a row store as a To Do task.

    The access token is acquired once before the first row. Each row is then
    validated, resolved, built and submitted independently: a failing row is
    recorded in its result cell and the batch moves on. Only failures before
    the loop (missing result column, token acquisition) abort the run.

    Example:
        >>> engine = SyncEngine(manager, TodoClient(), CsvRowStore("tasks.csv"),
        ...                     time_zone="Asia/Tokyo", notifier=print)
        >>> report = engine.run()
    """

    RESULT_COLUMN = "result"

    def __init__(
        self,
        token_manager: AccessTokenProvider,
        todo_client: TodoClient,
        row_store: RowStore,
        time_zone: str = "UTC",
        due_encoding: DueEncoding = "local",
        notifier: Notifier | None = None,
    ):
        self.token_manager = token_manager
        self.todo_client = todo_client
        self.row_store = row_store
        self.payload_builder = PayloadBuilder(time_zone, due_encoding)
        self.notifier = notifier or _log_notifier

    def _result_column(self, header: list[str]) -> int:
        if not header:
            raise ConfigurationError("Row store has no header row")
        try:
            return header.index(self.RESULT_COLUMN)
        except ValueError:
            raise ConfigurationError(
                f"Header row has no '{self.RESULT_COLUMN}' column"
            ) from None

    def run(self) -> BatchReport:
        """Sync all rows.

        Returns:
            BatchReport with one outcome per row, or with `error` set when
            the batch was aborted before any row was processed.
        """
        try:
            header, rows = self.row_store.read_rows()
            result_column = self._result_column(header)
            access_token = self.token_manager.get_access_token()
        except (ConfigurationError, AuthError) as e:
            logger.error(f"Sync aborted: {e}")
            report = BatchReport(error=str(e))
            self.notifier(report.summary())
            return report

        logger.info(f"Syncing {len(rows)} rows")
        resolver = ListResolver(self.todo_client, access_token)
        report = BatchReport()

        for row in rows:
            outcome = self.sync_row(row, resolver, access_token)
            report.outcomes.append(outcome)
            # Header occupies row 0
            self._record(row.index + 1, result_column, outcome.render(), report)

        try:
            self.row_store.flush()
        except Exception as e:
            logger.exception("Failed to flush results")
            report.write_errors.append(str(e))

        logger.info(report.summary())
        self.notifier(report.summary())
        return report

    def _record(self, row: int, column: int, value: str, report: BatchReport) -> None:
        """Write one result cell; a failed write is reported, not raised."""
        try:
            self.row_store.write_cell(row, column, value)
        except Exception as e:
            logger.exception(f"Failed to write result for row {row}")
            report.write_errors.append(str(e))

    def sync_row(self, row: TaskRow, resolver: ListResolver, access_token: str) -> SyncOutcome:
        """Sync one row and return its outcome. Never raises for row-level failures."""
        if not row.text("title") or not row.text("list_name"):
            return Skipped(row.index)

        try:
            list_id = resolver.resolve(row.text("list_name"))
            payload = self.payload_builder.build(row)
            task = self.todo_client.create_task(access_token, list_id, payload)
        except RowError as e:
            logger.warning(f"Row {row.index + 1} failed: {e}")
            return Failed(row.index, str(e))
        except Exception as e:
            logger.exception(f"Row {row.index + 1} failed unexpectedly")
            return Failed(row.index, str(e))

        logger.debug(f"Row {row.index + 1} registered as task {task.get('id')}")
        return Succeeded(row.index, task.get("id"))
