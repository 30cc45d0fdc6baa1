"""
Activity sync orchestration.

Imports new Strava activities into an athlete's sheet.

Sync Flow:
1. Look up the athlete in the metadata sheet
2. Resolve the time window (explicit dates or last synced activity)
3. Refresh the Strava access token
4. Fetch one page of activities for the window
5. Sort ascending by local start date
6. Drop activities whose ID is already in the sheet
7. Repair the header row (whenever anything was fetched)
8. Append the new rows

A failure at any step aborts the sync. Nothing is written before
step 7, so an aborted sync leaves the sheet untouched.

Two syncs of the same athlete in one process are serialized. Syncs in
separate processes are not coordinated: both may read the ID column
before either appends and write the same activity twice.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Optional

from sheetsync.features.sheets.repository import ActivitySheetRepository, UserRepository
from sheetsync.features.sheets.store import SheetStore
from sheetsync.features.strava.client import StravaClient
from sheetsync.features.strava.models import ActivityRecord
from sheetsync.features.strava.oauth import StravaOAuth
from sheetsync.features.users.models import User
from sheetsync.shared.exceptions import StoreError, UserNotFoundError
from .dedup import filter_new_activities
from .window import DateInput, resolve_window

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncResult:
    imported_count: int
    message: str


class SyncService:
    """
    Main sync orchestrator.

    Usage:
        service = SyncService(store)
        result = await service.sync("Jane Doe")
        result = await service.sync("Jane Doe", start_date="2024-01-01", end_date="2024-01-31")
    """

    def __init__(
        self,
        store: SheetStore,
        oauth: Optional[StravaOAuth] = None,
        strava: Optional[StravaClient] = None
    ):
        self.users = UserRepository(store)
        self.activities = ActivitySheetRepository(store)
        self.oauth = oauth or StravaOAuth()
        self.strava = strava or StravaClient()
        self._user_locks: dict[str, asyncio.Lock] = {}
        self._lock_holders: dict[str, int] = {}

    async def sync(
        self,
        display_name: str,
        start_date: Optional[DateInput] = None,
        end_date: Optional[DateInput] = None
    ) -> SyncResult:
        """
        Sync activities for a single athlete.

        Raises:
            UserNotFoundError: Unknown display name
            UpstreamAuthError: Refresh token rejected (account must be reconnected)
            UpstreamFetchError: Activities request failed
            StoreError: Spreadsheet read/write failed
        """
        user = await self.users.get_by_display_name(display_name)
        if not user:
            raise UserNotFoundError(display_name)

        async with self._user_lock(display_name):
            return await self._sync(user, start_date, end_date)

    @asynccontextmanager
    async def _user_lock(self, display_name: str):
        """Per-athlete lock, dropped once no sync holds or awaits it."""
        lock = self._user_locks.setdefault(display_name, asyncio.Lock())
        self._lock_holders[display_name] = self._lock_holders.get(display_name, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_holders[display_name] -= 1
            if not self._lock_holders[display_name]:
                del self._lock_holders[display_name]
                del self._user_locks[display_name]

    async def _sync(
        self,
        user: User,
        start_date: Optional[DateInput],
        end_date: Optional[DateInput]
    ) -> SyncResult:
        display_name = user.display_name
        window = await resolve_window(self.activities, display_name, start_date, end_date)
        logger.info(
            f"Syncing {display_name!r}: after={window.after} before={window.before}"
        )

        access_token = await self.oauth.refresh_access_token(user.refresh_token)
        raw_activities = await self.strava.get_activities(
            access_token,
            after=window.after,
            before=window.before
        )

        fetched = sorted(
            (ActivityRecord.from_strava(data) for data in raw_activities),
            key=lambda a: a.start_date_local
        )

        # Read IDs right before filtering, not earlier in the sync
        existing_ids = await self.activities.get_activity_ids(display_name)
        new_activities = filter_new_activities(fetched, existing_ids)

        if fetched:
            await self._repair_headers(display_name)
        if new_activities:
            await self.activities.append_activities(display_name, new_activities)

        count = len(new_activities)
        logger.info(
            f"Synced {count} new activities for {display_name!r} "
            f"({len(fetched)} fetched)"
        )
        return SyncResult(
            imported_count=count,
            message=f"Synced {count} new activities."
        )

    async def _repair_headers(self, display_name: str) -> None:
        """Rewrite the header row; sheets created by older versions may lack columns."""
        try:
            await self.activities.write_headers(display_name)
        except StoreError as e:
            logger.error(f"Failed to update headers for {display_name!r}: {e}")
