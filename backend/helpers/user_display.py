"""
Display helpers for annotating records with their author.

Referenced users may be missing (ids are never cleaned up), so every helper
degrades to a placeholder instead of failing.
"""

from typing import Optional

import repositories.db_models as db_models
from models.config import settings

UNKNOWN_AUTHOR = "Unknown"
ANONYMOUS_UPLOADER = "Anonymous"


def display_name(
    user: Optional[db_models.User], fallback: str = UNKNOWN_AUTHOR
) -> str:
    """Display name, then username, then ``fallback``."""
    if user is None:
        return fallback
    return user.display_name or user.username or fallback


def avatar_url(user: Optional[db_models.User]) -> str:
    """Profile picture, or the configured default avatar."""
    if user is None or not user.profile_picture:
        return settings.DEFAULT_AVATAR_URL
    return user.profile_picture
