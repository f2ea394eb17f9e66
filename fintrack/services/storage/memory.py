"""
In-Memory Tabular Store

Behaves like a spreadsheet with no formatting: tables are lists of rows,
row positions are 1-based and row 1 is the header. Used by the test suite
and by `STORAGE_BACKEND=memory` for running the backend without Google
credentials. Nothing survives a restart.
"""

import copy
from typing import Any

from fintrack.services.storage.interface import (
    NotFoundError,
    TabularStore,
)


class InMemoryTabularStore(TabularStore):
    """Dictionary-of-lists implementation of the tabular store."""

    def __init__(self):
        self._tables: dict[str, list[list[Any]]] = {}

    def _table(self, name: str) -> list[list[Any]]:
        try:
            return self._tables[name]
        except KeyError:
            raise NotFoundError(f"Table not found: {name}")

    def ensure_table(self, name: str, columns: list[str]) -> bool:
        if name in self._tables:
            return False
        self._tables[name] = [list(columns)]
        return True

    def read_all(self, name: str) -> list[list[Any]]:
        # Copies, so callers can't mutate storage by accident
        return copy.deepcopy(self._table(name))

    def append_row(self, name: str, values: list[Any]) -> int:
        table = self._table(name)
        table.append(list(values))
        return len(table)

    def overwrite_row(self, name: str, row_index: int, values: list[Any]) -> None:
        self.check_data_row(name, row_index)
        row = self._table(name)[row_index - 1]
        for offset, value in enumerate(values):
            if offset < len(row):
                row[offset] = value
            else:
                row.append(value)

    def delete_row(self, name: str, row_index: int) -> None:
        self.check_data_row(name, row_index)
        del self._table(name)[row_index - 1]
