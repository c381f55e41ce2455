"""Row store interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


def normalize_header(name: Any) -> str:
    """Normalize a header cell for name lookup."""
    return str(name or "").lstrip("\ufeff").strip().lower()


@dataclass
class TaskRow:
    """One data row keyed by normalized header name.

    Attributes:
        index: Position in the batch (0 = first row after the header).
        values: Raw cell values by column name.
    """

    index: int
    values: dict[str, Any] = field(default_factory=dict)

    def get(self, name: str, default: Any = None) -> Any:
        return self.values.get(name, default)

    def text(self, name: str) -> str:
        """Cell value as a stripped string ("" when empty)."""
        value = self.values.get(name)
        if value is None:
            return ""
        return str(value).strip()


class RowStore(ABC):
    """Tabular source of task rows and sink for per-row results.

    Row 0 of the table is the header. Cell coordinates are zero-based.
    """

    @abstractmethod
    def read_table(self) -> list[list[Any]]:
        """Read the whole table, header row first."""

    @abstractmethod
    def write_cell(self, row: int, column: int, value: str) -> None:
        """Write a single cell."""

    def flush(self) -> None:
        """Persist buffered writes."""

    def read_rows(self) -> tuple[list[str], list[TaskRow]]:
        """Read the header and the data rows as TaskRows."""
        table = self.read_table()
        if not table:
            return [], []

        header = [normalize_header(cell) for cell in table[0]]
        rows = []
        for index, cells in enumerate(table[1:]):
            values = {
                name: cells[col] if col < len(cells) else None
                for col, name in enumerate(header)
                if name
            }
            rows.append(TaskRow(index=index, values=values))
        return header, rows
