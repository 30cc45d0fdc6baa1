"""
Sheet repositories.

Data access layer for the metadata sheet and the per-athlete activity
sheets. All reads go to the store; nothing is cached between calls.
"""

import logging
from typing import Iterable, Optional

from sheetsync.config import settings
from sheetsync.features.strava.models import ActivityRecord
from sheetsync.features.users.models import User
from sheetsync.shared.constants import (
    ACTIVITY_DATE_COLUMN_INDEX,
    ACTIVITY_DATE_RANGE,
    ACTIVITY_HEADER_RANGE,
    ACTIVITY_HEADERS,
    ACTIVITY_ID_RANGE,
    METADATA_DATA_RANGE,
    METADATA_HEADER_RANGE,
    METADATA_HEADERS,
    METADATA_TOKEN_COLUMN,
)
from .store import SheetStore

logger = logging.getLogger(__name__)


class UserRepository:
    """
    Repository for linked athletes (metadata sheet).

    Row N of the metadata sheet (N >= 2) holds the (N-1)th user.
    """

    def __init__(self, store: SheetStore, metadata_table: Optional[str] = None):
        self.store = store
        self.table = metadata_table or settings.metadata_sheet_title

    async def ensure_table(self) -> bool:
        """
        Create the metadata sheet with its header if it does not exist.

        Returns:
            True if the sheet was created
        """
        if self.table in await self.store.list_tables():
            return False

        await self.store.create_table(self.table)
        await self.store.write_range(self.table, METADATA_HEADER_RANGE, [METADATA_HEADERS])
        logger.info(f"Created metadata sheet {self.table!r}")
        return True

    async def get_all(self) -> list[User]:
        """All users in sheet order (blank rows included as empty users)."""
        rows = await self.store.read_range(self.table, METADATA_DATA_RANGE)
        return [User.from_row(row) for row in rows]

    async def get_by_display_name(self, display_name: str) -> User | None:
        """
        Get user by display name.

        Returns:
            User if found, None otherwise
        """
        for user in await self.get_all():
            if user.display_name == display_name:
                return user
        return None

    async def update_refresh_token(self, display_name: str, refresh_token: str) -> bool:
        """
        Overwrite the refresh token of an existing user.

        Returns:
            True if the user existed and was updated
        """
        users = await self.get_all()
        for index, user in enumerate(users):
            if user.display_name == display_name:
                cell = f"{METADATA_TOKEN_COLUMN}{index + 2}"
                await self.store.write_range(self.table, cell, [[refresh_token]])
                return True
        return False

    async def add(self, user: User) -> None:
        """Append a new user row."""
        await self.store.append_rows(self.table, [user.to_row()])


class ActivitySheetRepository:
    """Repository for per-athlete activity sheets."""

    def __init__(self, store: SheetStore):
        self.store = store

    async def create_sheet(self, table: str) -> None:
        """
        Create an athlete's sheet and write the header row.

        Raises:
            TableExistsError: If the sheet already exists
        """
        await self.store.create_table(table)
        await self.write_headers(table)

    async def write_headers(self, table: str) -> None:
        """(Re)write the fixed header row."""
        await self.store.write_range(table, ACTIVITY_HEADER_RANGE, [ACTIVITY_HEADERS])

    async def get_activity_ids(self, table: str) -> set[str]:
        """Activity IDs already in the sheet (column A)."""
        rows = await self.store.read_range(table, ACTIVITY_ID_RANGE)
        return {str(row[0]) for row in rows if row and row[0] != ""}

    async def get_latest_activity_date(self, table: str) -> Optional[str]:
        """
        Date of the most recently appended activity.

        Rows are appended in ascending date order within a sync, so the
        last row is taken as the latest.

        Returns:
            start_date_local string of the last row, None if the sheet has no activities
        """
        rows = await self.store.read_range(table, ACTIVITY_DATE_RANGE)
        for row in reversed(rows):
            if not row:
                continue
            if len(row) > ACTIVITY_DATE_COLUMN_INDEX and row[ACTIVITY_DATE_COLUMN_INDEX]:
                return str(row[ACTIVITY_DATE_COLUMN_INDEX])
            return None
        return None

    async def append_activities(self, table: str, activities: Iterable[ActivityRecord]) -> int:
        """
        Append activities as rows, in the given order.

        Returns:
            Number of rows appended
        """
        rows = [activity.to_row() for activity in activities]
        if not rows:
            return 0
        await self.store.append_rows(table, rows)
        return len(rows)
