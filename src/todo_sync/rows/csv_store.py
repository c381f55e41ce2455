"""CSV file row store."""

from __future__ import annotations

import codecs
import csv
import logging
from pathlib import Path
from typing import Any

from todo_sync.exceptions import ConfigurationError, ResultWriteFailed
from todo_sync.rows.memory import MemoryRowStore

logger = logging.getLogger(__name__)


class CsvRowStore(MemoryRowStore):
    """Row store backed by a CSV file.

    The file is read once on first access; result writes are buffered and
    written back on flush(). A UTF-8 byte order mark (as written by Excel)
    is dropped on read and restored on write.
    """

    def __init__(self, path: str | Path, encoding: str = "utf-8"):
        super().__init__()
        self.path = Path(path)
        self.encoding = encoding
        self._has_bom = False
        self._loaded = False

    def _load(self) -> None:
        if self._loaded:
            return
        if not self.path.exists():
            raise ConfigurationError(f"CSV file not found: {self.path}")

        with open(self.path, "rb") as f:
            self._has_bom = f.read(len(codecs.BOM_UTF8)) == codecs.BOM_UTF8

        with open(self.path, newline="", encoding=self._file_encoding) as f:
            self.table = [row for row in csv.reader(f)]
        self._loaded = True

    @property
    def _file_encoding(self) -> str:
        return "utf-8-sig" if self._has_bom else self.encoding

    def read_table(self) -> list[list[Any]]:
        self._load()
        return super().read_table()

    def write_cell(self, row: int, column: int, value: str) -> None:
        self._load()
        super().write_cell(row, column, value)

    def flush(self) -> None:
        """Write the table back to the file.

        Raises:
            ResultWriteFailed: If the file cannot be written.
        """
        if not self.writes:
            return

        try:
            with open(self.path, "w", newline="", encoding=self._file_encoding) as f:
                csv.writer(f).writerows(self.table)
        except OSError as e:
            raise ResultWriteFailed(str(self.path), str(e)) from e

        logger.info(f"Wrote {len(self.writes)} results to {self.path}")
        self.writes.clear()
