"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets is the database because:
1. The user can view and fix their data directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)

TRADEOFFS:
- No transactions and no locking: concurrent writers interleave freely
- Rows are identified by position, so a delete shifts every later row
- Limited query capabilities (we scan and filter in Python)

Only the credential handshake is retried. Reads and writes are issued
exactly once; a failure surfaces to the caller as a StorageError.
"""

from typing import Any, Optional

import gspread
from google.oauth2.service_account import Credentials
from gspread.utils import a1_to_rowcol, rowcol_to_a1
from tenacity import retry, stop_after_attempt, wait_exponential

from fintrack.config import GoogleSheetsSettings, get_settings
from fintrack.services.storage.interface import (
    ConnectionError,
    NotFoundError,
    StorageError,
    TabularStore,
)


SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive",
]

# Header styling: bold white text on indigo (#4F46E5)
HEADER_FORMAT = {
    "textFormat": {
        "bold": True,
        "foregroundColor": {"red": 1.0, "green": 1.0, "blue": 1.0},
    },
    "backgroundColor": {"red": 79 / 255, "green": 70 / 255, "blue": 229 / 255},
}

NEW_SHEET_ROWS = 1000

# Numbers come back as numbers, not as display strings
VALUE_RENDER_OPTION = "UNFORMATTED_VALUE"


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for the connection.
    """

    def __init__(
        self,
        settings: Optional[GoogleSheetsSettings] = None,
        client: Optional[gspread.Client] = None,
    ):
        self._client: Optional[gspread.Client] = client
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    @property
    def settings(self) -> GoogleSheetsSettings:
        return self._settings

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=SCOPES,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_worksheet(self, name: str) -> gspread.Worksheet:
        """Get an existing worksheet by title."""
        spreadsheet = self.get_spreadsheet()
        try:
            return spreadsheet.worksheet(name)
        except gspread.WorksheetNotFound:
            raise NotFoundError(f"Table not found: {name}")

    def create_worksheet(self, name: str, columns: list[str]) -> gspread.Worksheet:
        """Create a worksheet with a styled header row."""
        spreadsheet = self.get_spreadsheet()
        sheet = spreadsheet.add_worksheet(
            title=name,
            rows=NEW_SHEET_ROWS,
            cols=len(columns),
        )
        sheet.append_row(columns, value_input_option="RAW")
        header_range = f"A1:{rowcol_to_a1(1, len(columns))}"
        sheet.format(header_range, HEADER_FORMAT)
        return sheet


class GoogleSheetsTabularStore(TabularStore):
    """
    Google Sheets implementation of the tabular store.

    Each table is a worksheet. Worksheet handles are cached for the
    lifetime of the store; a store is created per backend process.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()
        self._worksheets: dict[str, gspread.Worksheet] = {}

    def _sheet(self, name: str) -> gspread.Worksheet:
        if name not in self._worksheets:
            self._worksheets[name] = self._client.get_worksheet(name)
        return self._worksheets[name]

    def ensure_table(self, name: str, columns: list[str]) -> bool:
        if name in self._worksheets:
            return False
        try:
            self._worksheets[name] = self._client.get_worksheet(name)
            return False
        except NotFoundError:
            pass

        try:
            self._worksheets[name] = self._client.create_worksheet(name, columns)
        except gspread.exceptions.APIError as e:
            raise StorageError(f"Failed to create table {name}: {e}")

        return True

    def read_all(self, name: str) -> list[list[Any]]:
        try:
            return self._sheet(name).get_all_values(
                value_render_option=VALUE_RENDER_OPTION
            )
        except gspread.exceptions.APIError as e:
            raise StorageError(f"Failed to read {name}: {e}")

    def append_row(self, name: str, values: list[Any]) -> int:
        try:
            response = self._sheet(name).append_row(values, value_input_option="RAW")
        except gspread.exceptions.APIError as e:
            raise StorageError(f"Failed to append to {name}: {e}")

        # e.g. "Transactions!A5:H5"; the sheet title itself may contain "!"
        updated_range = response["updates"]["updatedRange"]
        first_cell = updated_range.rsplit("!", 1)[-1].split(":")[0]
        row, _ = a1_to_rowcol(first_cell)
        return row

    def overwrite_row(self, name: str, row_index: int, values: list[Any]) -> None:
        self.check_data_row(name, row_index)
        cells = f"A{row_index}:{rowcol_to_a1(row_index, len(values))}"
        try:
            self._sheet(name).update(
                range_name=cells,
                values=[values],
                value_input_option="RAW",
            )
        except gspread.exceptions.APIError as e:
            raise StorageError(f"Failed to update row {row_index} of {name}: {e}")

    def delete_row(self, name: str, row_index: int) -> None:
        self.check_data_row(name, row_index)
        try:
            self._sheet(name).delete_rows(row_index)
        except gspread.exceptions.APIError as e:
            raise StorageError(f"Failed to delete row {row_index} of {name}: {e}")
