"""
Duplicate filtering against activities already in a sheet.
"""

from typing import Iterable

from sheetsync.features.strava.models import ActivityRecord


def filter_new_activities(
    activities: Iterable[ActivityRecord],
    existing_ids: set[str]
) -> list[ActivityRecord]:
    """Activities whose ID is not in existing_ids, order preserved."""
    return [a for a in activities if str(a.id) not in existing_ids]
