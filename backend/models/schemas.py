from pydantic import BaseModel, EmailStr, Field, ConfigDict
from datetime import datetime
from typing import Any, Dict, Optional, List
from repositories.db_models import (
    AdminActionType,
    AdminTargetType,
    FriendRequestStatus,
    UserRole,
)


# User Schemas
class UserBase(BaseModel):
    email: EmailStr
    username: str = Field(..., min_length=3, max_length=50)
    display_name: Optional[str] = Field(None, max_length=100)


class UserCreate(UserBase):
    password: str = Field(..., min_length=6)
    bio: Optional[str] = None
    year_of_study: Optional[int] = Field(None, ge=1, le=10)
    institution: Optional[str] = None
    department: Optional[str] = None


class UserLogin(BaseModel):
    username: str
    password: str


class User(BaseModel):
    """Account as seen by its owner and by admins. Never carries the password hash."""

    id: int
    username: str
    email: str
    display_name: str
    profile_picture: Optional[str] = None
    bio: Optional[str] = None
    year_of_study: Optional[int] = None
    institution: Optional[str] = None
    department: Optional[str] = None
    role: UserRole
    is_admin: bool
    is_banned: bool
    ban_reason: Optional[str] = None
    points: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserPublic(BaseModel):
    """Public user profile (visible to others)."""

    id: int
    username: str
    display_name: str
    profile_picture: Optional[str] = None
    department: Optional[str] = None
    year_of_study: Optional[int] = None
    institution: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class UserProfileUpdate(BaseModel):
    display_name: Optional[str] = Field(None, max_length=100)
    email: Optional[EmailStr] = None
    bio: Optional[str] = None
    profile_picture: Optional[str] = None
    year_of_study: Optional[int] = Field(None, ge=1, le=10)
    institution: Optional[str] = None
    department: Optional[str] = None


class UserStats(BaseModel):
    papers_uploaded: int
    discussions_started: int
    discussion_replies: int
    groups_joined: int


# Token Schemas
class Token(BaseModel):
    access_token: str
    token_type: str
    user: User


class TokenData(BaseModel):
    username: Optional[str] = None


class MessageResponse(BaseModel):
    message: str


# Paper Schemas
class PaperCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    course: str = Field(..., min_length=1)
    year: str = Field(..., min_length=1)
    institution: str = Field(..., min_length=1)


class Paper(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    course: str
    year: str
    institution: str
    file_url: str
    uploader_id: int
    resource_type: str
    upload_date: datetime
    downloads: int

    model_config = ConfigDict(from_attributes=True)


class PaperWithUploader(Paper):
    uploader_name: str


# Resource Schemas
class ResourceCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    type: str = Field(..., min_length=1)
    course: Optional[str] = None


class Resource(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    type: str
    course: Optional[str] = None
    file_url: str
    uploader_id: int
    upload_date: datetime
    downloads: int
    rating: int

    model_config = ConfigDict(from_attributes=True)


class ResourceRating(BaseModel):
    rating: int = Field(..., ge=1, le=5)


# Discussion Schemas
class DiscussionPostCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1)
    course: Optional[str] = None
    tags: List[str] = Field(default_factory=list)


class DiscussionPost(BaseModel):
    id: int
    title: str
    content: str
    author_id: int
    course: Optional[str] = None
    tags: List[str]
    votes: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DiscussionReplyCreate(BaseModel):
    content: str = Field(..., min_length=1)
    parent_reply_id: Optional[int] = None


class DiscussionReply(BaseModel):
    id: int
    content: str
    author_id: int
    post_id: int
    parent_reply_id: Optional[int] = None
    votes: int
    is_accepted: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DiscussionCommentCreate(BaseModel):
    content: str = Field(..., min_length=1)
    post_id: int
    reply_id: Optional[int] = None


class DiscussionComment(BaseModel):
    id: int
    content: str
    author_id: int
    post_id: int
    reply_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DiscussionCommentWithAuthor(DiscussionComment):
    author_name: str
    author_avatar: str


class DiscussionReplyWithAuthor(DiscussionReply):
    author_name: str
    author_avatar: str


class DiscussionReplyWithComments(DiscussionReplyWithAuthor):
    comments: List[DiscussionCommentWithAuthor]


class DiscussionPostWithAuthor(DiscussionPost):
    author_name: str
    author_avatar: str


class DiscussionPostDetail(DiscussionPostWithAuthor):
    """A post with its replies, each with its comments."""

    replies: List[DiscussionReplyWithComments]


class VoteRequest(BaseModel):
    value: int = 1


# Study Group Schemas
class StudyGroupCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    course: Optional[str] = None
    color: str = Field(default="#4338ca", pattern=r"^#[0-9a-fA-F]{6}$")


class StudyGroup(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    course: Optional[str] = None
    creator_id: int
    color: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class StudyGroupMemberAdd(BaseModel):
    user_id: Optional[int] = None


class StudyGroupMember(BaseModel):
    id: int
    group_id: int
    user_id: int
    is_admin: bool
    joined_at: datetime

    model_config = ConfigDict(from_attributes=True)


class StudyGroupMemberWithUser(StudyGroupMember):
    user_name: str
    user_avatar: str


# Study Session Schemas
class StudySessionCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    start_time: datetime
    end_time: datetime
    location: Optional[str] = None
    is_virtual: bool = False
    meeting_link: Optional[str] = None


class StudySession(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    start_time: datetime
    end_time: datetime
    group_id: int
    location: Optional[str] = None
    is_virtual: bool
    meeting_link: Optional[str] = None
    created_by: int

    model_config = ConfigDict(from_attributes=True)


# Activity Schemas
class Activity(BaseModel):
    id: int
    user_id: int
    type: str
    target_id: int
    target_type: str
    metadata: Dict[str, Any]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# Group Chat Schemas
class GroupChatMessageCreate(BaseModel):
    message: str = Field(..., min_length=1, max_length=2000)


class GroupChatMessage(BaseModel):
    id: int
    group_id: int
    user_id: int
    message: str
    timestamp: datetime

    model_config = ConfigDict(from_attributes=True)


class GroupChatMessageWithUser(GroupChatMessage):
    user_name: str


# Friend Schemas
class FriendRequestCreate(BaseModel):
    recipient_id: int


class FriendRequest(BaseModel):
    id: int
    sender_id: int
    receiver_id: int
    status: FriendRequestStatus
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class FriendRequestWithSender(FriendRequest):
    sender_name: str
    sender_avatar: str


class FriendshipInfo(BaseModel):
    id: int
    created_at: datetime


class Friend(BaseModel):
    """The other party of a friendship, seen from ``user_id``."""

    id: int
    user_id: int
    friend_id: int
    friend_name: str
    friend_avatar: str
    friendship: FriendshipInfo


# Direct Message Schemas
class DirectMessageCreate(BaseModel):
    receiver_id: int
    content: str = Field(..., min_length=1, max_length=5000)
    attachment_url: Optional[str] = None


class DirectMessage(BaseModel):
    id: int
    sender_id: int
    receiver_id: int
    content: str
    attachment_url: Optional[str] = None
    is_read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# Search Schemas
class SearchResult(BaseModel):
    id: int
    title: str
    type: str
    url: str


# Admin Schemas
class BanRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=500)


class AdminAction(BaseModel):
    id: int
    admin_id: int
    target_type: AdminTargetType
    target_id: int
    action: AdminActionType
    reason: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AdminStats(BaseModel):
    total_users: int
    active_users: int
    banned_users: int
    total_papers: int
    total_discussions: int
    total_groups: int
    total_sessions: int
    recent_activities: List[Activity]
