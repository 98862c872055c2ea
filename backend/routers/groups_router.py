"""Study group endpoints: groups, members, sessions and chat."""

from typing import List, Optional

from fastapi import APIRouter, Depends, status

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from helpers.pagination import ChatLimit
from models.exceptions import InsufficientPermissionsException
from repositories.database import get_store
from repositories.memory_store import MemStorage
from services.session_service import SessionService
from services.study_group_service import GroupChatService, StudyGroupService

router = APIRouter(prefix="/groups", tags=["groups"])


@router.post("", response_model=schemas.StudyGroup, status_code=status.HTTP_201_CREATED)
def create_group(
    group: schemas.StudyGroupCreate,
    current_user: db_models.User = Depends(auth.get_current_active_user),
    store: MemStorage = Depends(get_store),
) -> db_models.StudyGroup:
    """Create a group; the creator becomes its first member and admin."""
    return StudyGroupService.create_group(store, group, current_user.id)


@router.get("", response_model=List[schemas.StudyGroup])
def get_groups(
    course: Optional[str] = None, store: MemStorage = Depends(get_store)
) -> List[db_models.StudyGroup]:
    return StudyGroupService.get_groups(store, course=course)


@router.get("/user/{user_id}", response_model=List[schemas.StudyGroup])
def get_user_groups(
    user_id: int,
    current_user: db_models.User = Depends(auth.get_current_active_user),
    store: MemStorage = Depends(get_store),
) -> List[db_models.StudyGroup]:
    """Groups of a user. Users may only list their own groups."""
    if user_id != current_user.id:
        raise InsufficientPermissionsException(
            "You are not authorized to view these groups"
        )
    return StudyGroupService.get_user_study_groups(store, user_id)


@router.get("/{group_id}", response_model=schemas.StudyGroup)
def get_group(
    group_id: int, store: MemStorage = Depends(get_store)
) -> db_models.StudyGroup:
    return StudyGroupService.get_group_or_raise(store, group_id)


# Members


@router.post(
    "/{group_id}/members",
    response_model=schemas.StudyGroupMember,
    status_code=status.HTTP_201_CREATED,
)
def add_member(
    group_id: int,
    member: Optional[schemas.StudyGroupMemberAdd] = None,
    current_user: db_models.User = Depends(auth.get_current_active_user),
    store: MemStorage = Depends(get_store),
) -> db_models.StudyGroupMember:
    """Join a group, or add another user when the caller is a group admin."""
    user_id = member.user_id if member and member.user_id else current_user.id
    return StudyGroupService.add_member(store, group_id, user_id, current_user.id)


@router.get(
    "/{group_id}/members", response_model=List[schemas.StudyGroupMemberWithUser]
)
def get_members(group_id: int, store: MemStorage = Depends(get_store)):
    return StudyGroupService.get_members(store, group_id)


@router.delete(
    "/{group_id}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT
)
def remove_member(
    group_id: int,
    user_id: int,
    current_user: db_models.User = Depends(auth.get_current_active_user),
    store: MemStorage = Depends(get_store),
) -> None:
    """Leave a group, or remove a member when the caller is a group admin."""
    StudyGroupService.remove_member(store, group_id, user_id, current_user.id)


# Sessions


@router.post(
    "/{group_id}/sessions",
    response_model=schemas.StudySession,
    status_code=status.HTTP_201_CREATED,
)
def create_session(
    group_id: int,
    session: schemas.StudySessionCreate,
    current_user: db_models.User = Depends(auth.get_current_active_user),
    store: MemStorage = Depends(get_store),
) -> db_models.StudySession:
    """Schedule a session. Only group members may do this."""
    return SessionService.create_session(store, group_id, session, current_user.id)


@router.get("/{group_id}/sessions", response_model=List[schemas.StudySession])
def get_group_sessions(
    group_id: int, store: MemStorage = Depends(get_store)
) -> List[db_models.StudySession]:
    return SessionService.get_group_sessions(store, group_id)


# Chat


@router.post(
    "/{group_id}/chat",
    response_model=schemas.GroupChatMessage,
    status_code=status.HTTP_201_CREATED,
)
def post_chat_message(
    group_id: int,
    chat_message: schemas.GroupChatMessageCreate,
    current_user: db_models.User = Depends(auth.get_current_active_user),
    store: MemStorage = Depends(get_store),
) -> db_models.GroupChatMessage:
    return GroupChatService.post_message(
        store, group_id, current_user.id, chat_message.message
    )


@router.get("/{group_id}/chat", response_model=List[schemas.GroupChatMessageWithUser])
def get_chat_messages(
    group_id: int,
    limit: ChatLimit = None,
    current_user: db_models.User = Depends(auth.get_current_active_user),
    store: MemStorage = Depends(get_store),
):
    """The most recent messages of a group, oldest first. Members only."""
    StudyGroupService.get_group_or_raise(store, group_id)
    StudyGroupService.require_member(store, group_id, current_user.id)
    return GroupChatService.get_messages(store, group_id, limit)
