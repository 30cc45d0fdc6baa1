"""
Spreadsheet store.

A spreadsheet is treated as a set of named tables (sheets). The store
exposes only the handful of operations the ledger needs, so the
Google Sheets backend can be swapped for an in-memory one in tests.

Ranges are A1 notation relative to the table, e.g. "A2:F" or "C5".
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Optional

import gspread
import requests
from google.auth.exceptions import GoogleAuthError
from gspread.exceptions import APIError, GSpreadException, WorksheetNotFound

from sheetsync.shared.exceptions import StoreError, TableExistsError

logger = logging.getLogger(__name__)

Rows = list[list]


class SheetStore(ABC):
    """Named-table backend. All operations are async."""

    @abstractmethod
    async def read_range(self, table: str, cell_range: str) -> Rows:
        """Rows in the range; trailing empty rows and cells are omitted."""

    @abstractmethod
    async def write_range(self, table: str, cell_range: str, rows: Rows) -> None:
        """Overwrite the range with the given rows."""

    @abstractmethod
    async def append_rows(self, table: str, rows: Rows) -> None:
        """Append rows after the last non-empty row."""

    @abstractmethod
    async def create_table(self, name: str) -> None:
        """
        Create an empty table.

        Raises:
            TableExistsError: If a table with this name already exists
        """

    @abstractmethod
    async def list_tables(self) -> list[str]:
        """Titles of all tables."""


class GoogleSheetStore(SheetStore):
    """
    Google Sheets backend (gspread).

    gspread is blocking, so every call runs in a worker thread.
    Values are written RAW: strings stay strings, e.g. "5.00".

    Usage:
        store = GoogleSheetStore(gspread_client, spreadsheet_id)
        rows = await store.read_range("Jane Doe", "A2:A")
    """

    NEW_TABLE_ROWS = 1000
    NEW_TABLE_COLS = 26

    def __init__(self, client: gspread.Client, spreadsheet_id: str):
        self.client = client
        self.spreadsheet_id = spreadsheet_id
        self._spreadsheet: Optional[gspread.Spreadsheet] = None

    def _open(self) -> gspread.Spreadsheet:
        if self._spreadsheet is None:
            self._spreadsheet = self.client.open_by_key(self.spreadsheet_id)
        return self._spreadsheet

    def _worksheet(self, table: str) -> gspread.Worksheet:
        return self._open().worksheet(table)

    async def _call(self, table: Optional[str], action: str, func, *args, **kwargs):
        try:
            return await asyncio.to_thread(func, *args, **kwargs)
        except WorksheetNotFound as e:
            raise StoreError("Sheet not found", table) from e
        except APIError as e:
            logger.error(f"Google Sheets {action} failed for {table!r}: {e}")
            raise StoreError(f"{action} failed: {e}", table) from e
        except (GSpreadException, requests.RequestException, GoogleAuthError) as e:
            logger.error(f"Google Sheets {action} failed for {table!r}: {e!r}")
            raise StoreError(f"{action} failed: {e!r}", table) from e

    async def read_range(self, table: str, cell_range: str) -> Rows:
        def read():
            return list(self._worksheet(table).get(cell_range))
        return await self._call(table, "read", read)

    async def write_range(self, table: str, cell_range: str, rows: Rows) -> None:
        def write():
            self._worksheet(table).update(range_name=cell_range, values=rows)
        await self._call(table, "write", write)

    async def append_rows(self, table: str, rows: Rows) -> None:
        def append():
            self._worksheet(table).append_rows(rows, value_input_option="RAW")
        await self._call(table, "append", append)

    async def create_table(self, name: str) -> None:
        def create():
            self._open().add_worksheet(
                title=name,
                rows=self.NEW_TABLE_ROWS,
                cols=self.NEW_TABLE_COLS
            )
        try:
            await self._call(name, "create", create)
        except StoreError as e:
            if "already exists" in str(e):
                raise TableExistsError("Sheet already exists", name) from e
            raise

    async def list_tables(self) -> list[str]:
        def titles():
            return [ws.title for ws in self._open().worksheets()]
        return await self._call(None, "list", titles)
