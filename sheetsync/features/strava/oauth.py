"""
Strava OAuth flow.

Handles:
- Authorization URL generation
- Code exchange for tokens (account linking)
- Token refresh (start of every sync)
"""

import logging
from typing import Optional
from urllib.parse import urlencode

import httpx

from sheetsync.config import settings
from sheetsync.shared.exceptions import UpstreamAuthError

logger = logging.getLogger(__name__)


class StravaOAuth:
    """
    Strava OAuth handler.

    Usage:
        oauth = StravaOAuth()
        auth_url = oauth.get_authorization_url(
            redirect_uri="https://example.com/api/v1/auth/strava",
            state="Jane Doe"
        )
        tokens = await oauth.exchange_code(code)
        access_token = await oauth.refresh_access_token(refresh_token)
    """

    AUTHORIZE_URL = "https://www.strava.com/oauth/authorize"
    TOKEN_URL = "https://www.strava.com/oauth/token"

    def __init__(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None
    ):
        self.client_id = client_id or settings.strava_client_id
        self.client_secret = client_secret or settings.strava_client_secret
        self._transport = transport
        self._timeout = timeout or settings.http_timeout_seconds

    def get_authorization_url(
        self,
        redirect_uri: str,
        state: Optional[str] = None,
        scope: str = "activity:read_all"
    ) -> str:
        """
        Generate Strava OAuth authorization URL.

        Args:
            redirect_uri: URL to redirect after authorization
            state: Display name the account will be linked under
            scope: OAuth scope (default: activity:read_all)

        activity:read_all is requested so private activities land in
        the ledger too. Consent is forced so that re-linking always
        issues a fresh refresh token.
        """
        params = {
            "client_id": self.client_id,
            "redirect_uri": redirect_uri,
            "response_type": "code",
            "approval_prompt": "force",
            "scope": scope,
        }
        if state:
            params["state"] = state

        return f"{self.AUTHORIZE_URL}?{urlencode(params)}"

    async def exchange_code(self, code: str) -> dict:
        """
        Exchange authorization code for tokens.

        Returns:
            {
                "access_token": "...",
                "refresh_token": "...",
                "expires_at": 1234567890,
                "athlete": {"id": 123, "firstname": "...", ...}
            }

        Raises:
            UpstreamAuthError: If token exchange fails
        """
        return await self._token_request({
            "code": code,
            "grant_type": "authorization_code",
        }, action="Token exchange")

    async def refresh_token(self, refresh_token: str) -> dict:
        """
        Exchange a refresh token for a fresh access token.

        Raises:
            UpstreamAuthError: If Strava rejects the refresh token
                (revoked access, invalid token)
        """
        return await self._token_request({
            "refresh_token": refresh_token,
            "grant_type": "refresh_token",
        }, action="Token refresh")

    async def refresh_access_token(self, refresh_token: str) -> str:
        """Refresh and return only the short-lived access token."""
        tokens = await self.refresh_token(refresh_token)
        try:
            return tokens["access_token"]
        except KeyError:
            raise UpstreamAuthError("Token refresh response had no access_token")

    async def _token_request(self, payload: dict, action: str) -> dict:
        data = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            **payload,
        }
        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                timeout=self._timeout
            ) as client:
                response = await client.post(self.TOKEN_URL, data=data)
        except httpx.HTTPError as e:
            logger.error(f"Strava {action.lower()} request failed: {e}")
            raise UpstreamAuthError(f"{action} failed: {e}") from e

        if response.status_code != 200:
            logger.error(f"Strava {action.lower()} failed: {response.text}")
            raise UpstreamAuthError(
                f"{action} failed: {response.status_code}"
            )

        return response.json()
