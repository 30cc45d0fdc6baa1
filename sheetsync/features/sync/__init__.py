"""
Activity sync.

Provides:
- SyncService: Main sync orchestrator
- resolve_window / SyncWindow: Strava time window for a sync
- filter_new_activities: Drop activities already in the sheet
"""

from .service import SyncService, SyncResult
from .window import SyncWindow, resolve_window, explicit_window, to_epoch
from .dedup import filter_new_activities

__all__ = [
    "SyncService",
    "SyncResult",
    "SyncWindow",
    "resolve_window",
    "explicit_window",
    "to_epoch",
    "filter_new_activities",
]
