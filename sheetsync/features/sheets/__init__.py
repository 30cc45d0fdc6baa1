"""
Google Sheets storage module.

Usage:
    from sheetsync.features.sheets import create_sheet_store, UserRepository

Components:
- SheetStore: Named-table backend interface
- GoogleSheetStore: gspread implementation
- UserRepository: Metadata sheet (display name -> Strava refresh token)
- ActivitySheetRepository: Per-athlete activity sheets
"""

from .store import SheetStore, GoogleSheetStore
from .client import create_sheet_store
from .repository import UserRepository, ActivitySheetRepository

__all__ = [
    "SheetStore",
    "GoogleSheetStore",
    "create_sheet_store",
    "UserRepository",
    "ActivitySheetRepository",
]
