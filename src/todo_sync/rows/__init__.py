"""Tabular row stores.

A row store supplies task rows (header row first) and receives one result
string per row.

Usage:
    from todo_sync.rows import CsvRowStore

    store = CsvRowStore("tasks.csv")
    header, rows = store.read_rows()
"""

from __future__ import annotations

from todo_sync.rows.base import RowStore, TaskRow, normalize_header
from todo_sync.rows.csv_store import CsvRowStore
from todo_sync.rows.memory import MemoryRowStore

__all__ = ["RowStore", "TaskRow", "normalize_header", "MemoryRowStore", "CsvRowStore"]
