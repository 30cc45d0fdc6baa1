"""
Account linking.

An athlete is linked under a display name chosen on the login page.
The display name keys the metadata row and titles the athlete's sheet.
"""

import logging
from typing import Optional

from sheetsync.features.sheets.repository import ActivitySheetRepository, UserRepository
from sheetsync.features.sheets.store import SheetStore
from sheetsync.features.strava.oauth import StravaOAuth
from sheetsync.shared.exceptions import SheetSyncError, TableExistsError, UpstreamAuthError
from .models import User

logger = logging.getLogger(__name__)


class UserService:
    """
    Service for linking Strava accounts to sheets.

    Usage:
        service = UserService(store)
        await service.ensure_metadata()
        await service.link_user("Jane Doe", "12345", refresh_token)
    """

    def __init__(self, store: SheetStore, oauth: Optional[StravaOAuth] = None):
        self.users = UserRepository(store)
        self.activities = ActivitySheetRepository(store)
        self.oauth = oauth or StravaOAuth()

    async def ensure_metadata(self) -> None:
        """Create the metadata sheet if this is a fresh spreadsheet."""
        await self.users.ensure_table()

    async def list_users(self) -> list[User]:
        return [u for u in await self.users.get_all() if u.display_name]

    async def link_user(
        self,
        display_name: str,
        external_id: str,
        refresh_token: str
    ) -> bool:
        """
        Link (or re-link) a Strava account under a display name.

        Existing display name: only its refresh token is replaced.
        New display name: the athlete's sheet is created with the header
        row, then the metadata row is appended.

        Returns:
            True if a new user was created
        """
        if await self.users.update_refresh_token(display_name, refresh_token):
            logger.info(f"Updated refresh token for {display_name!r}")
            return False

        try:
            await self.activities.create_sheet(display_name)
        except TableExistsError:
            # Sheet left over without a metadata row; reuse it
            logger.warning(f"Sheet {display_name!r} already exists, linking to it")

        await self.users.add(User(
            display_name=display_name,
            external_id=str(external_id),
            refresh_token=refresh_token
        ))
        logger.info(f"Linked new user {display_name!r} (athlete {external_id})")
        return True

    async def connect_account(self, code: str, display_name: Optional[str] = None) -> str:
        """
        Complete the OAuth callback: exchange the code and link the account.

        Args:
            code: Authorization code from the Strava redirect
            display_name: Name passed through OAuth state; defaults to the
                athlete's Strava first and last name

        Returns:
            Display name the account was linked under

        Raises:
            UpstreamAuthError: If the code exchange fails or returns no refresh token
            SheetSyncError: If no display name was given and the athlete has no name
        """
        tokens = await self.oauth.exchange_code(code)
        refresh_token = tokens.get("refresh_token")
        if not refresh_token:
            raise UpstreamAuthError("Token exchange returned no refresh_token")

        athlete = tokens.get("athlete") or {}
        name = (display_name or "").strip() or (
            f"{athlete.get('firstname') or ''} {athlete.get('lastname') or ''}".strip()
        )
        if not name:
            raise SheetSyncError("No display name for the linked account")

        await self.ensure_metadata()
        await self.link_user(name, str(athlete.get("id", "")), refresh_token)
        return name
