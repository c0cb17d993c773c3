"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets is offered as an optional backend because:
1. The user can look at (and back up) their raw data directly in Sheets
2. No database setup required
3. Data follows the user across machines

TRADEOFFS:
- Each slot is a single cell of JSON (fine for personal-sized collections)
- No transactions (a combined import writes three rows independently)

Layout: one worksheet, one row per slot: [key, value_json, updated_at].
"""

from datetime import datetime, timezone
from typing import Optional

import gspread
from google.oauth2.service_account import Credentials
from tenacity import retry, stop_after_attempt, wait_exponential

from finance_tracker.config import GoogleSheetsSettings, get_settings
from finance_tracker.services.storage.interface import (
    ConnectionError,
    KeyValueStoreInterface,
    StorageError,
)


SLOT_COLUMNS = [
    "key",
    "value_json",
    "updated_at",
]


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for connecting.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

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
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
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

    def get_slots_sheet(self) -> gspread.Worksheet:
        """Get or create the slots worksheet."""
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(self._settings.slots_sheet_name)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=self._settings.slots_sheet_name,
                rows=100,
                cols=len(SLOT_COLUMNS),
            )
            sheet.append_row(SLOT_COLUMNS)
        return sheet


class GoogleSheetsKeyValueStore(KeyValueStoreInterface):
    """
    Google Sheets implementation of slot storage.

    A slot is one row; its value lives in the second column as JSON text.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def get(self, key: str) -> Optional[str]:
        """Read a slot's JSON text, None if the slot has no row."""
        try:
            sheet = self._client.get_slots_sheet()
            all_rows = sheet.get_all_values()[1:]  # Skip header

            for row in all_rows:
                if row and row[0] == key:
                    return row[1] if len(row) > 1 else None

            return None
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to read slot '{key}': {e}")

    def set(self, key: str, value: str) -> None:
        """Overwrite a slot's row, appending one if the slot is new."""
        updated_at = datetime.now(timezone.utc).isoformat()
        try:
            sheet = self._client.get_slots_sheet()
            all_rows = sheet.get_all_values()

            # Start from 2 (row 1 is header)
            for idx, row in enumerate(all_rows[1:], start=2):
                if row and row[0] == key:
                    sheet.update_cell(idx, 2, value)
                    sheet.update_cell(idx, 3, updated_at)
                    return

            sheet.append_row([key, value, updated_at], value_input_option="RAW")
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to write slot '{key}': {e}")
