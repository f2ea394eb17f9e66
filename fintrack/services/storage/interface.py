"""
Abstract Tabular Store Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Use Google Sheets in production
2. Use in-memory storage for testing and local runs
3. Keep the action handlers decoupled from gspread

The interface is intentionally tiny - the spreadsheet is only ever
accessed through append / read-all / overwrite-row / delete-row.
Rows are addressed by their 1-based physical position; row 1 is the header.
"""

from abc import ABC, abstractmethod
from typing import Any

from fintrack.models.transaction import FIRST_DATA_ROW


class TabularStore(ABC):
    """
    Abstract interface for a spreadsheet-like store of named tables.

    Any storage implementation (Google Sheets, in-memory, ...)
    must implement these methods.
    """

    @abstractmethod
    def ensure_table(self, name: str, columns: list[str]) -> bool:
        """
        Create a table with a header row if it does not exist yet.

        Idempotent: an existing table is left untouched.

        Args:
            name: Table (worksheet) name
            columns: Header row values

        Returns:
            True if the table was created by this call
        """
        pass

    @abstractmethod
    def read_all(self, name: str) -> list[list[Any]]:
        """
        Read every row of a table, header included.

        Args:
            name: Table name

        Returns:
            Rows in physical order; index 0 is row position 1

        Raises:
            NotFoundError: If the table doesn't exist
        """
        pass

    @abstractmethod
    def append_row(self, name: str, values: list[Any]) -> int:
        """
        Append a row after the last row.

        Returns:
            The row position the values landed on
        """
        pass

    @abstractmethod
    def overwrite_row(self, name: str, row_index: int, values: list[Any]) -> None:
        """
        Replace the cells of an existing row, starting at the first column.

        Raises:
            InvalidRowError: If row_index addresses the header or less
            NotFoundError: If the row doesn't exist
        """
        pass

    @abstractmethod
    def delete_row(self, name: str, row_index: int) -> None:
        """
        Physically remove a row; later rows shift up by one.

        Raises:
            InvalidRowError: If row_index addresses the header or less
            NotFoundError: If the row doesn't exist
        """
        pass

    def check_data_row(self, name: str, row_index: int) -> None:
        """Shared guard for overwrite/delete."""
        if row_index < FIRST_DATA_ROW:
            raise InvalidRowError(f"Row {row_index} is not a data row of {name}")
        if row_index > len(self.read_all(name)):
            raise NotFoundError(f"Row {row_index} not found")


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Table or row not found in storage."""
    pass


class InvalidRowError(StorageError):
    """Row position can never hold data (header or below)."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
