"""
Shared fixtures: in-memory spreadsheet and fake Strava API.
"""

import json
import re
from urllib.parse import parse_qs

import httpx
import pytest

from sheetsync.features.sheets.store import SheetStore
from sheetsync.features.strava import StravaClient, StravaOAuth
from sheetsync.shared.exceptions import StoreError, TableExistsError


# =============================================================================
# In-memory Sheet Store
# =============================================================================

_A1 = re.compile(r"^([A-Z]+)(\d*)(?::([A-Z]+)(\d*))?$")


def _col(letters: str) -> int:
    index = 0
    for ch in letters:
        index = index * 26 + (ord(ch) - ord("A") + 1)
    return index - 1


def _parse_range(cell_range: str):
    """(first_row, last_row|None, first_col, last_col), zero-based, inclusive."""
    match = _A1.match(cell_range)
    start_col, start_row, end_col, end_row = match.groups()
    end_col = end_col or start_col
    end_row = end_row if match.group(3) else start_row
    return (
        int(start_row) - 1,
        int(end_row) - 1 if end_row else None,
        _col(start_col),
        _col(end_col),
    )


class InMemorySheetStore(SheetStore):
    """
    Dict-backed SheetStore.

    tables maps title -> rows (row 1 first). Every mutating call is
    recorded in `writes`; `fail` holds (operation, table) pairs that raise.
    """

    def __init__(self):
        self.tables: dict[str, list[list]] = {}
        self.writes: list[tuple] = []
        self.fail: set[tuple[str, str]] = set()

    def _check(self, op: str, table: str):
        if (op, table) in self.fail:
            raise StoreError(f"{op} failed", table)
        if op != "create" and table not in self.tables:
            raise StoreError("Sheet not found", table)

    async def read_range(self, table, cell_range):
        self._check("read", table)
        first_row, last_row, first_col, last_col = _parse_range(cell_range)
        rows = self.tables[table][first_row:None if last_row is None else last_row + 1]
        result = []
        for row in rows:
            cells = list(row[first_col:last_col + 1])
            while cells and cells[-1] == "":
                cells.pop()
            result.append(cells)
        while result and not result[-1]:
            result.pop()
        return result

    async def write_range(self, table, cell_range, rows):
        self._check("write", table)
        self.writes.append(("write", table, cell_range, rows))
        first_row, _, first_col, _ = _parse_range(cell_range)
        sheet = self.tables[table]
        for offset, values in enumerate(rows):
            index = first_row + offset
            while len(sheet) <= index:
                sheet.append([])
            row = sheet[index]
            needed = first_col + len(values)
            row.extend([""] * (needed - len(row)))
            row[first_col:needed] = list(values)

    async def append_rows(self, table, rows):
        self._check("append", table)
        self.writes.append(("append", table, rows))
        sheet = self.tables[table]
        while sheet and not any(cell != "" for cell in sheet[-1]):
            sheet.pop()
        sheet.extend(list(row) for row in rows)

    async def create_table(self, name):
        self._check("create", name)
        if name in self.tables:
            raise TableExistsError("Sheet already exists", name)
        self.writes.append(("create", name))
        self.tables[name] = []

    async def list_tables(self):
        return list(self.tables)


@pytest.fixture
def store():
    return InMemorySheetStore()


# =============================================================================
# Fake Strava API
# =============================================================================

class FakeStrava:
    """Serves the token and activities endpoints through httpx.MockTransport."""

    def __init__(self):
        self.activities: list[dict] = []
        self.token_status = 200
        self.activities_status = 200
        self.athlete = {"id": 4242, "firstname": "Jane", "lastname": "Doe"}
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/oauth/token":
            if self.token_status != 200:
                return httpx.Response(self.token_status, json={"message": "Bad Request"})
            form = parse_qs(request.content.decode())
            body = {"access_token": "access-123", "refresh_token": "refresh-new", "expires_at": 0}
            if form.get("grant_type") == ["authorization_code"]:
                body["athlete"] = self.athlete
            return httpx.Response(200, json=body)
        if request.url.path == "/api/v3/athlete/activities":
            if self.activities_status != 200:
                return httpx.Response(self.activities_status, json={"message": "error"})
            return httpx.Response(200, content=json.dumps(self.activities))
        return httpx.Response(404)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def oauth(self) -> StravaOAuth:
        return StravaOAuth(client_id="1", client_secret="secret", transport=self.transport)

    def client(self) -> StravaClient:
        return StravaClient(transport=self.transport)

    def requests_to(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]


@pytest.fixture
def strava():
    return FakeStrava()


def _make_activity(activity_id: int, start_date_local: str, **fields) -> dict:
    data = {
        "id": activity_id,
        "name": f"Run {activity_id}",
        "type": "Run",
        "distance": 5000.0,
        "moving_time": 1800,
        "start_date_local": start_date_local,
        "total_elevation_gain": 42.0,
        "average_speed": 2.5,
        "max_speed": 4.0,
    }
    data.update(fields)
    return data


@pytest.fixture
def make_activity():
    """Factory for raw Strava activity summaries."""
    return _make_activity
