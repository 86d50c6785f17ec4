"""User profiles and session state."""

from asset_rbac.auth.profile import ProfileListener, ProfileSession, UserProfile
from asset_rbac.auth.repository import ProfileRepository

__all__ = [
    "ProfileListener",
    "ProfileRepository",
    "ProfileSession",
    "UserProfile",
]
