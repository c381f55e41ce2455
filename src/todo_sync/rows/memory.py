"""In-memory row store."""

from __future__ import annotations

from typing import Any

from todo_sync.rows.base import RowStore


class MemoryRowStore(RowStore):
    """Row store holding the table as a list of lists."""

    def __init__(self, table: list[list[Any]] | None = None):
        self.table = [list(row) for row in (table or [])]
        self.writes: list[tuple[int, int, str]] = []

    def read_table(self) -> list[list[Any]]:
        return [list(row) for row in self.table]

    def write_cell(self, row: int, column: int, value: str) -> None:
        while len(self.table) <= row:
            self.table.append([])
        cells = self.table[row]
        while len(cells) <= column:
            cells.append("")
        cells[column] = value
        self.writes.append((row, column, value))

    def column(self, name: str) -> list[Any]:
        """Values of a named column below the header."""
        col = [str(c).strip().lower() for c in self.table[0]].index(name)
        return [row[col] if col < len(row) else "" for row in self.table[1:]]
