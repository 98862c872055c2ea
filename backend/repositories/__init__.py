"""
Repository pattern implementation for data access layer.
"""

from .activity_repository import ActivityRepository
from .admin_action_repository import AdminActionRepository
from .base import BaseRepository
from .chat_repository import DirectMessageRepository, GroupChatRepository
from .discussion_repository import (
    DiscussionCommentRepository,
    DiscussionPostRepository,
    DiscussionReplyRepository,
)
from .friend_repository import FriendRepository
from .paper_repository import PaperRepository
from .resource_repository import ResourceRepository
from .study_group_repository import (
    StudyGroupMemberRepository,
    StudyGroupRepository,
    StudySessionRepository,
)
from .user_repository import UserRepository

__all__ = [
    "ActivityRepository",
    "AdminActionRepository",
    "BaseRepository",
    "DirectMessageRepository",
    "DiscussionCommentRepository",
    "DiscussionPostRepository",
    "DiscussionReplyRepository",
    "FriendRepository",
    "GroupChatRepository",
    "PaperRepository",
    "ResourceRepository",
    "StudyGroupMemberRepository",
    "StudyGroupRepository",
    "StudySessionRepository",
    "UserRepository",
]
