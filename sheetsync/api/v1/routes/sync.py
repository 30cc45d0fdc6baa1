"""
Sync Routes

POST /sync - Import new activities for one athlete.
"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from sheetsync.api.deps import get_sync_service
from sheetsync.features.sync import SyncService
from sheetsync.shared.exceptions import (
    StoreError,
    UpstreamAuthError,
    UpstreamFetchError,
    UserNotFoundError,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# === Schemas ===

class SyncRequest(BaseModel):
    """Sync request. Dates are inclusive calendar days."""
    model_config = ConfigDict(populate_by_name=True)

    display_name: Optional[str] = Field(default=None, alias="displayName")
    start_date: Optional[date] = Field(default=None, alias="startDate")
    end_date: Optional[date] = Field(default=None, alias="endDate")


class SyncResponse(BaseModel):
    success: bool
    count: int
    message: str


# === Endpoints ===

@router.post("", response_model=SyncResponse)
async def sync_activities(
    request: SyncRequest,
    service: SyncService = Depends(get_sync_service)
):
    """Import activities for an athlete since the last synced one, or for a date range."""
    if not request.display_name:
        raise HTTPException(status_code=400, detail="Display Name is required")

    try:
        result = await service.sync(
            request.display_name,
            start_date=request.start_date,
            end_date=request.end_date
        )
    except UserNotFoundError:
        raise HTTPException(status_code=404, detail="User not found")
    except UpstreamAuthError as e:
        logger.error(f"Sync auth error for {request.display_name!r}: {e}")
        raise HTTPException(
            status_code=401,
            detail="Strava authorization failed, please reconnect your account"
        )
    except UpstreamFetchError as e:
        logger.error(f"Sync fetch error for {request.display_name!r}: {e}")
        raise HTTPException(status_code=502, detail="Failed to sync data")
    except StoreError as e:
        logger.error(f"Sync store error for {request.display_name!r}: {e}")
        raise HTTPException(status_code=500, detail="Failed to sync data")

    return SyncResponse(
        success=True,
        count=result.imported_count,
        message=result.message
    )
