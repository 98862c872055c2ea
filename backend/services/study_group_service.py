"""
Study Group Service

Groups, memberships and the group chat.
"""

from typing import Any, List, Optional

from loguru import logger

import models.schemas as schemas
import repositories.db_models as db_models
from helpers.sanitization import sanitize_html, sanitize_plain_text
from helpers.user_display import avatar_url, display_name
from models.config import settings
from models.exceptions import (
    AlreadyMemberException,
    InsufficientPermissionsException,
    MembershipNotFoundException,
    StudyGroupNotFoundException,
    UserNotFoundException,
)
from repositories.chat_repository import GroupChatRepository
from repositories.memory_store import MemStorage
from repositories.study_group_repository import (
    StudyGroupMemberRepository,
    StudyGroupRepository,
)
from repositories.user_repository import UserRepository
from services.activity_service import ActivityService


class StudyGroupService:
    """Service for study groups and their members."""

    @staticmethod
    def get_group_or_raise(store: MemStorage, group_id: int) -> db_models.StudyGroup:
        group = StudyGroupRepository(store).get_by_id(group_id)
        if group is None:
            raise StudyGroupNotFoundException(group_id)
        return group

    @staticmethod
    def require_member(store: MemStorage, group_id: int, user_id: int) -> None:
        """
        Raises:
            InsufficientPermissionsException: If the user is not in the group
        """
        if not StudyGroupMemberRepository(store).is_member(group_id, user_id):
            raise InsufficientPermissionsException(
                "You must be a member of this study group"
            )

    @staticmethod
    def create_group(
        store: MemStorage, group_data: schemas.StudyGroupCreate, creator_id: int
    ) -> db_models.StudyGroup:
        """
        Create a group with its creator as group admin.

        The group, the creator's membership and the feed entry are written as
        one unit: if any step fails, none of them remain.
        """
        with store.atomic(
            store.study_groups, store.study_group_members, store.activities
        ):
            group = StudyGroupRepository(store).create(
                {
                    "name": sanitize_plain_text(group_data.name),
                    "description": sanitize_html(group_data.description),
                    "course": sanitize_plain_text(group_data.course),
                    "color": group_data.color,
                    "creator_id": creator_id,
                }
            )
            StudyGroupMemberRepository(store).add(group.id, creator_id, is_admin=True)
            ActivityService.record(
                store,
                user_id=creator_id,
                activity_type=db_models.ActivityType.GROUP_CREATED,
                target_id=group.id,
                target_type="study_group",
                metadata={"name": group.name},
            )

        logger.info(f"Study group {group.id} created by user {creator_id}")
        return group

    @staticmethod
    def get_groups(
        store: MemStorage, course: Optional[str] = None
    ) -> List[db_models.StudyGroup]:
        filters = {"course": course} if course else None
        return StudyGroupRepository(store).filter_by(filters)

    @staticmethod
    def get_user_study_groups(
        store: MemStorage, user_id: int
    ) -> List[db_models.StudyGroup]:
        """Groups the user belongs to."""
        group_ids = StudyGroupMemberRepository(store).group_ids_for_user(user_id)
        return StudyGroupRepository(store).get_by_ids(group_ids)

    # Members

    @staticmethod
    def add_member(
        store: MemStorage, group_id: int, user_id: int, added_by: int
    ) -> db_models.StudyGroupMember:
        """
        Add a user to a group.

        Users may join on their own; adding someone else requires being an
        admin of the group.

        Raises:
            StudyGroupNotFoundException: If the group does not exist
            UserNotFoundException: If the user does not exist
            InsufficientPermissionsException: If adding someone else without
                being a group admin
            AlreadyMemberException: If the user is already a member
        """
        member_repo = StudyGroupMemberRepository(store)
        with store.atomic(store.study_group_members, store.activities):
            group = StudyGroupService.get_group_or_raise(store, group_id)
            if UserRepository(store).get_by_id(user_id) is None:
                raise UserNotFoundException(user_id)
            if user_id != added_by:
                adder = member_repo.get_membership(group_id, added_by)
                if adder is None or not adder.is_admin:
                    raise InsufficientPermissionsException(
                        "Only group admins can add other members"
                    )
            if member_repo.is_member(group_id, user_id):
                raise AlreadyMemberException(group_id, user_id)

            member = member_repo.add(group_id, user_id)
            ActivityService.record(
                store,
                user_id=user_id,
                activity_type=db_models.ActivityType.GROUP_JOINED,
                target_id=group_id,
                target_type="study_group",
                metadata={"name": group.name},
            )

        logger.info(f"User {user_id} joined study group {group_id}")
        return member

    @staticmethod
    def get_members(store: MemStorage, group_id: int) -> List[dict[str, Any]]:
        user_repo = UserRepository(store)
        members = []
        for member in StudyGroupMemberRepository(store).get_members(group_id):
            user = user_repo.get_by_id(member.user_id)
            members.append(
                {
                    **member.model_dump(),
                    "user_name": display_name(user),
                    "user_avatar": avatar_url(user),
                }
            )
        return members

    @staticmethod
    def remove_member(
        store: MemStorage, group_id: int, user_id: int, removed_by: int
    ) -> None:
        """
        Remove a member. Users may leave; group admins may remove anyone.

        Raises:
            InsufficientPermissionsException: If the caller may not remove the user
            MembershipNotFoundException: If the user is not a member
        """
        member_repo = StudyGroupMemberRepository(store)
        with store.lock:
            if user_id != removed_by:
                remover = member_repo.get_membership(group_id, removed_by)
                if remover is None or not remover.is_admin:
                    raise InsufficientPermissionsException(
                        "You are not authorized to remove this member"
                    )
            if not member_repo.remove(group_id, user_id):
                raise MembershipNotFoundException(group_id, user_id)
        logger.info(f"User {user_id} removed from study group {group_id}")


class GroupChatService:
    """Service for a study group's chat."""

    @staticmethod
    def post_message(
        store: MemStorage, group_id: int, user_id: int, message: str
    ) -> db_models.GroupChatMessage:
        """
        Raises:
            StudyGroupNotFoundException: If the group does not exist
            InsufficientPermissionsException: If the user is not a member
        """
        StudyGroupService.get_group_or_raise(store, group_id)
        StudyGroupService.require_member(store, group_id, user_id)
        return GroupChatRepository(store).create(
            {
                "group_id": group_id,
                "user_id": user_id,
                "message": sanitize_plain_text(message),
            }
        )

    @staticmethod
    def get_messages(
        store: MemStorage, group_id: int, limit: Optional[int] = None
    ) -> List[dict[str, Any]]:
        """
        The last ``limit`` messages (default 50), oldest first, with sender name.
        """
        if not limit:
            limit = settings.CHAT_DEFAULT_LIMIT
        user_repo = UserRepository(store)
        return [
            {
                **message.model_dump(),
                "user_name": display_name(user_repo.get_by_id(message.user_id)),
            }
            for message in GroupChatRepository(store).get_for_group(group_id, limit)
        ]
