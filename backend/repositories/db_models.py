"""
Record types held by the in-memory entity store.

Records are frozen pydantic models: the store is the only place that produces
new versions of a record (via ``model_copy(update=...)``), so code outside the
repositories cannot mutate stored state in place.
"""

import enum
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from helpers.time_utils import utc_now


class UserRole(str, enum.Enum):
    REGULAR = "regular"
    ADMIN = "admin"


class FriendRequestStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class AdminActionType(str, enum.Enum):
    BAN = "ban"
    UNBAN = "unban"
    DELETE = "delete"
    MODIFY = "modify"
    GRANT_ADMIN = "grant_admin"
    REVOKE_ADMIN = "revoke_admin"


class AdminTargetType(str, enum.Enum):
    USER = "user"
    PAPER = "paper"
    DISCUSSION = "discussion"
    GROUP = "group"
    SESSION = "session"


class ActivityType(str, enum.Enum):
    PAPER_UPLOAD = "paper_upload"
    RESOURCE_UPLOAD = "resource_upload"
    POST_CREATED = "post_created"
    GROUP_CREATED = "group_created"
    GROUP_JOINED = "group_joined"
    SESSION_CREATED = "session_created"


class Record(BaseModel):
    """Base for all stored records."""

    model_config = ConfigDict(frozen=True)

    id: int


class User(Record):
    username: str
    email: str
    hashed_password: str
    display_name: str
    profile_picture: Optional[str] = None
    bio: Optional[str] = None
    year_of_study: Optional[int] = None
    institution: Optional[str] = None
    department: Optional[str] = None
    role: UserRole = UserRole.REGULAR
    is_banned: bool = False
    ban_reason: Optional[str] = None
    points: int = 0
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class Paper(Record):
    title: str
    description: Optional[str] = None
    course: str
    year: str
    institution: str
    file_url: str
    uploader_id: int
    resource_type: str = "past_paper"
    upload_date: datetime = Field(default_factory=utc_now)
    downloads: int = 0


class Resource(Record):
    title: str
    description: Optional[str] = None
    type: str  # notes, presentation, cheat sheet, ...
    course: Optional[str] = None
    file_url: str
    uploader_id: int
    upload_date: datetime = Field(default_factory=utc_now)
    downloads: int = 0
    rating: int = 0


class DiscussionPost(Record):
    title: str
    content: str
    author_id: int
    course: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    votes: int = 0
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class DiscussionReply(Record):
    content: str
    author_id: int
    post_id: int
    parent_reply_id: Optional[int] = None
    votes: int = 0
    is_accepted: bool = False
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class DiscussionComment(Record):
    content: str
    author_id: int
    post_id: int
    reply_id: Optional[int] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class StudyGroup(Record):
    name: str
    description: Optional[str] = None
    course: Optional[str] = None
    creator_id: int
    color: str = "#4338ca"
    created_at: datetime = Field(default_factory=utc_now)


class StudyGroupMember(Record):
    group_id: int
    user_id: int
    is_admin: bool = False
    joined_at: datetime = Field(default_factory=utc_now)


class StudySession(Record):
    title: str
    description: Optional[str] = None
    start_time: datetime
    end_time: datetime
    group_id: int
    location: Optional[str] = None
    is_virtual: bool = False
    meeting_link: Optional[str] = None
    created_by: int


class Activity(Record):
    user_id: int
    type: str
    target_id: int
    target_type: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=utc_now)


class GroupChatMessage(Record):
    group_id: int
    user_id: int
    message: str
    timestamp: datetime = Field(default_factory=utc_now)


class FriendRequest(Record):
    sender_id: int
    receiver_id: int
    status: FriendRequestStatus = FriendRequestStatus.PENDING
    created_at: datetime = Field(default_factory=utc_now)


class Friendship(Record):
    user1_id: int
    user2_id: int
    created_at: datetime = Field(default_factory=utc_now)

    def other_party(self, user_id: int) -> int:
        return self.user2_id if self.user1_id == user_id else self.user1_id


class AdminAction(Record):
    admin_id: int
    target_type: AdminTargetType
    target_id: int
    action: AdminActionType
    reason: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)


class DirectMessage(Record):
    sender_id: int
    receiver_id: int
    content: str
    attachment_url: Optional[str] = None
    is_read: bool = False
    created_at: datetime = Field(default_factory=utc_now)
