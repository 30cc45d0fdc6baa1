"""
Linked athletes.

Usage:
    from sheetsync.features.users import User
    from sheetsync.features.users.service import UserService

Models:
- User: Display name, Strava athlete ID and refresh token

Services (import from .service, which depends on the sheets feature):
- UserService: Account linking and listing
"""

from .models import User

__all__ = [
    "User",
]
