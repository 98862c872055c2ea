"""
Services layer for business logic.

This package contains service modules that encapsulate business logic
separate from the API routes.
"""

from .activity_service import ActivityService
from .admin_service import AdminService
from .auth_service import AuthService
from .discussion_service import DiscussionService
from .friend_service import FriendService
from .message_service import MessageService
from .paper_service import PaperService
from .resource_service import ResourceService
from .search_service import SearchService
from .session_service import SessionService
from .study_group_service import GroupChatService, StudyGroupService
from .user_service import UserService

__all__ = [
    "ActivityService",
    "AdminService",
    "AuthService",
    "DiscussionService",
    "FriendService",
    "GroupChatService",
    "MessageService",
    "PaperService",
    "ResourceService",
    "SearchService",
    "SessionService",
    "StudyGroupService",
    "UserService",
]
