"""
User Routes

GET /users - List linked athletes.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from sheetsync.api.deps import get_user_service
from sheetsync.features.users.service import UserService
from sheetsync.shared.exceptions import StoreError

logger = logging.getLogger(__name__)

router = APIRouter()


# === Schemas ===

class UserSchema(BaseModel):
    """Linked athlete. The refresh token is never returned."""
    displayName: str
    stravaId: str


class UserListResponse(BaseModel):
    users: list[UserSchema]


# === Endpoints ===

@router.get("", response_model=UserListResponse)
async def list_users(service: UserService = Depends(get_user_service)):
    """List linked athletes, initializing the spreadsheet on first use."""
    try:
        await service.ensure_metadata()
        users = await service.list_users()
    except StoreError as e:
        logger.error(f"Failed to fetch users: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch users")

    return UserListResponse(users=[
        UserSchema(displayName=u.display_name, stravaId=u.external_id)
        for u in users
    ])
