"""
Strava integration module.

Usage:
    from sheetsync.features.strava import StravaOAuth, StravaClient

Components:
- StravaOAuth: OAuth flow (auth URL, code exchange, token refresh)
- StravaClient: Activities listing
- ActivityRecord: Activity converted to sheet units
"""

from .models import ActivityRecord
from .oauth import StravaOAuth
from .client import StravaClient

__all__ = [
    "ActivityRecord",
    "StravaOAuth",
    "StravaClient",
]
