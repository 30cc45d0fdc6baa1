"""
API Router v1

Combines all route modules.
"""

from fastapi import APIRouter

from sheetsync.api.v1.routes import auth, sync, users

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["Auth"])
api_router.include_router(sync.router, prefix="/sync", tags=["Sync"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
