"""
Request dependencies.

Services are built once at startup (see main.lifespan) and shared by
all requests, so the per-athlete sync lock is process-wide.
"""

from fastapi import Request

from sheetsync.features.sync import SyncService
from sheetsync.features.users.service import UserService


def get_sync_service(request: Request) -> SyncService:
    """Dependency for the sync orchestrator."""
    return request.app.state.sync_service


def get_user_service(request: Request) -> UserService:
    """Dependency for account linking."""
    return request.app.state.user_service
