"""
Strava OAuth Routes

Endpoints for linking a Strava account:
- /auth/login - Initiate OAuth flow for a display name
- /auth/strava - Handle OAuth callback

The display name travels through Strava as the OAuth state.
"""

import logging
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import RedirectResponse

from sheetsync.api.deps import get_user_service
from sheetsync.config import settings
from sheetsync.features.users.service import UserService
from sheetsync.shared.exceptions import SheetSyncError

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_callback_url() -> str:
    """Get OAuth callback URL."""
    return f"{settings.base_url.rstrip('/')}/api/v1/auth/strava"


def _home(**params) -> RedirectResponse:
    return RedirectResponse(url=f"/?{urlencode(params)}")


@router.get("/login")
async def strava_login(
    name: Optional[str] = Query(None, description="Display name to link the account under"),
    service: UserService = Depends(get_user_service)
):
    """Redirect to Strava's consent page."""
    if not name:
        return _home(error="missing_name")

    if not settings.strava_client_id:
        raise HTTPException(
            status_code=503,
            detail="Strava integration not configured"
        )

    logger.info(f"Strava OAuth initiated for {name!r}")
    return RedirectResponse(
        url=service.oauth.get_authorization_url(_get_callback_url(), state=name)
    )


@router.get("/strava")
async def strava_callback(
    code: Optional[str] = Query(None),
    state: Optional[str] = Query(None),
    error: Optional[str] = Query(None),
    service: UserService = Depends(get_user_service)
):
    """Handle the Strava redirect: exchange the code and link the account."""
    if error or not code:
        logger.warning(f"Strava OAuth denied or missing code: {error}")
        return _home(error="auth_failed")

    try:
        display_name = await service.connect_account(code, display_name=state)
    except SheetSyncError as e:
        logger.error(f"Auth callback error: {e}")
        return _home(error="server_error")

    return _home(success="user_added", name=display_name)
