"""
Strava API client.

Lists an athlete's activities for a time window.

Only the first page of results is requested per call. If a window holds
more activities than fit on one page the remainder is not imported by
that sync; a warning is logged when a page comes back full.
"""

import logging
from typing import Optional

import httpx

from sheetsync.config import settings
from sheetsync.shared.constants import MAX_ACTIVITIES_PER_PAGE
from sheetsync.shared.exceptions import UpstreamFetchError

logger = logging.getLogger(__name__)


class StravaClient:
    """
    Async client for the Strava activities API.

    Usage:
        client = StravaClient()
        activities = await client.get_activities(access_token, after=1704067200)
    """

    API_URL = "https://www.strava.com/api/v3"

    def __init__(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None
    ):
        self._transport = transport
        self._timeout = timeout or settings.http_timeout_seconds

    async def get_activities(
        self,
        access_token: str,
        after: int = 0,
        before: Optional[int] = None,
        per_page: Optional[int] = None
    ) -> list[dict]:
        """
        Get one page of athlete activities.

        Args:
            access_token: Valid access token
            after: Epoch seconds, only activities starting after this time
            before: Epoch seconds, only activities starting before this time
            per_page: Page size (default from settings, max 200)

        Returns:
            List of raw activity summary dicts

        Raises:
            UpstreamFetchError: On transport failure or non-2xx response
        """
        per_page = min(per_page or settings.activities_per_page, MAX_ACTIVITIES_PER_PAGE)
        params = {"after": after, "per_page": per_page}
        if before:
            params["before"] = before

        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                timeout=self._timeout
            ) as client:
                response = await client.get(
                    f"{self.API_URL}/athlete/activities",
                    headers={"Authorization": f"Bearer {access_token}"},
                    params=params
                )
        except httpx.HTTPError as e:
            logger.error(f"Strava activities request failed: {e}")
            raise UpstreamFetchError(f"Activities request failed: {e}") from e

        if "X-RateLimit-Usage" in response.headers:
            logger.debug(
                f"Strava rate limit: {response.headers.get('X-RateLimit-Usage')} "
                f"/ {response.headers.get('X-RateLimit-Limit')}"
            )

        if not response.is_success:
            logger.error(
                f"Strava activities error: {response.status_code} - {response.text}"
            )
            raise UpstreamFetchError(
                f"API error: {response.status_code}"
            )

        activities = response.json()
        if len(activities) >= per_page:
            logger.warning(
                f"Strava returned a full page ({per_page}) for after={after} "
                f"before={before}; remaining activities in this window were not fetched"
            )
        return activities
