"""
Google Sheets client factory.

Authenticates with a service account, either from a JSON key file or
from the client email and private key held in settings.
"""

import gspread
from google.oauth2 import service_account

from sheetsync.config import Settings, settings as default_settings
from .store import GoogleSheetStore

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
TOKEN_URI = "https://oauth2.googleapis.com/token"


def get_credentials(settings: Settings) -> service_account.Credentials:
    """Build service account credentials from settings."""
    if settings.google_service_account_file:
        return service_account.Credentials.from_service_account_file(
            settings.google_service_account_file, scopes=SCOPES
        )
    if not (settings.google_client_email and settings.google_private_key):
        raise RuntimeError(
            "Google credentials not configured: set GOOGLE_SERVICE_ACCOUNT_FILE "
            "or GOOGLE_CLIENT_EMAIL and GOOGLE_PRIVATE_KEY"
        )
    return service_account.Credentials.from_service_account_info(
        {
            "type": "service_account",
            "client_email": settings.google_client_email,
            "private_key": settings.google_private_key,
            "token_uri": TOKEN_URI,
        },
        scopes=SCOPES,
    )


def create_sheet_store(settings: Settings = default_settings) -> GoogleSheetStore:
    """Create the Google Sheets store for the configured spreadsheet."""
    if not settings.google_spreadsheet_id:
        raise RuntimeError("GOOGLE_SPREADSHEET_ID is not configured")
    client = gspread.authorize(get_credentials(settings))
    return GoogleSheetStore(client, settings.google_spreadsheet_id)
