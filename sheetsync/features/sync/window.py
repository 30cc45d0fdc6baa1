"""
Sync window resolution.

Strava filters activities by start time with `after` / `before`
epoch seconds. The window comes either from dates the user picked or
from the last activity already in the athlete's sheet.
"""

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional, Union

from sheetsync.features.sheets.repository import ActivitySheetRepository
from sheetsync.shared.constants import SECONDS_PER_DAY
from sheetsync.shared.exceptions import StoreError

DateInput = Union[date, str]


@dataclass(frozen=True)
class SyncWindow:
    """Epoch-second bounds; before=None means open-ended."""

    after: int
    before: Optional[int] = None


def to_epoch(value: DateInput) -> int:
    """
    Epoch seconds for a calendar date or ISO-8601 timestamp.

    Dates are taken at 00:00 UTC. Timestamps without an offset
    (Strava's start_date_local) are read as UTC.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp())


def explicit_window(start_date: DateInput, end_date: Optional[DateInput] = None) -> SyncWindow:
    """Window for a user-picked range. The end date is inclusive through end of day."""
    before = to_epoch(end_date) + SECONDS_PER_DAY if end_date else None
    return SyncWindow(after=to_epoch(start_date), before=before)


async def resolve_window(
    activities: ActivitySheetRepository,
    display_name: str,
    start_date: Optional[DateInput] = None,
    end_date: Optional[DateInput] = None
) -> SyncWindow:
    """
    Resolve the window to request from Strava.

    Without a start date, syncs forward from the last row of the
    athlete's sheet, or from the beginning of time for an empty sheet.
    An end date without a start date is ignored.

    Raises:
        StoreError: If the sheet cannot be read or its last date is unparseable
    """
    if start_date:
        return explicit_window(start_date, end_date)

    latest = await activities.get_latest_activity_date(display_name)
    if not latest:
        return SyncWindow(after=0)

    try:
        return SyncWindow(after=to_epoch(latest))
    except ValueError as e:
        raise StoreError(f"Unparseable activity date {latest!r}", display_name) from e
