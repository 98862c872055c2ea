"""
User Service

Handles registration, profiles, user discovery and per-user statistics.
"""

from typing import List, Optional

from loguru import logger

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from helpers.sanitization import sanitize_html, sanitize_plain_text, sanitize_url
from models.exceptions import (
    UserAlreadyExistsException,
    UserNotFoundException,
)
from repositories.discussion_repository import (
    DiscussionPostRepository,
    DiscussionReplyRepository,
)
from repositories.friend_repository import FriendRepository
from repositories.memory_store import MemStorage
from repositories.paper_repository import PaperRepository
from repositories.study_group_repository import StudyGroupMemberRepository
from repositories.user_repository import UserRepository


_PLAIN_TEXT_FIELDS = ("display_name", "institution", "department")


def _clean_profile_fields(profile_update: schemas.UserProfileUpdate) -> dict:
    """Sanitize the fields the caller actually sent."""
    fields = profile_update.model_dump(exclude_unset=True)
    for key in _PLAIN_TEXT_FIELDS:
        if key in fields:
            fields[key] = sanitize_plain_text(fields[key])
    if "bio" in fields:
        fields["bio"] = sanitize_html(fields["bio"])
    if "profile_picture" in fields:
        fields["profile_picture"] = sanitize_url(fields["profile_picture"])
    # A name made only of markup keeps the current one
    if fields.get("display_name") == "":
        del fields["display_name"]
    return fields


class UserService:
    """Service for managing user accounts."""

    @staticmethod
    def register_user(
        store: MemStorage,
        user_data: schemas.UserCreate,
        role: db_models.UserRole = db_models.UserRole.REGULAR,
    ) -> db_models.User:
        """
        Register a new user.

        Args:
            store: Entity store
            user_data: Registration data
            role: Role of the new account (the seed routine creates the admin)

        Returns:
            Created user

        Raises:
            UserAlreadyExistsException: If username or email is already taken
        """
        user_repo = UserRepository(store)

        # Check and insert under one lock so two registrations cannot race
        with store.lock:
            if user_repo.get_by_username(user_data.username):
                raise UserAlreadyExistsException("Username already exists")
            if user_repo.get_by_email(user_data.email):
                raise UserAlreadyExistsException("Email already registered")

            user = user_repo.create(
                {
                    "username": user_data.username,
                    "email": user_data.email,
                    "hashed_password": auth.get_password_hash(user_data.password),
                    "display_name": sanitize_plain_text(user_data.display_name)
                    or user_data.username,
                    "bio": sanitize_html(user_data.bio),
                    "year_of_study": user_data.year_of_study,
                    "institution": sanitize_plain_text(user_data.institution),
                    "department": sanitize_plain_text(user_data.department),
                    "role": role,
                }
            )

        logger.info(f"User registered: {user.id} ({user.role.value})")
        return user

    @staticmethod
    def get_user_by_id(store: MemStorage, user_id: int) -> Optional[db_models.User]:
        return UserRepository(store).get_by_id(user_id)

    @staticmethod
    def get_user_by_id_or_raise(store: MemStorage, user_id: int) -> db_models.User:
        """
        Get user by ID or raise.

        Raises:
            UserNotFoundException: If user not found
        """
        user = UserRepository(store).get_by_id(user_id)
        if not user:
            raise UserNotFoundException(user_id)
        return user

    @staticmethod
    def get_all_users(
        store: MemStorage, skip: int = 0, limit: Optional[int] = None
    ) -> List[db_models.User]:
        return UserRepository(store).get_all(skip=skip, limit=limit)

    @staticmethod
    def update_profile(
        store: MemStorage, user_id: int, profile_update: schemas.UserProfileUpdate
    ) -> db_models.User:
        """
        Update the provided profile fields.

        Raises:
            UserNotFoundException: If user not found
            UserAlreadyExistsException: If the email belongs to another account
        """
        user_repo = UserRepository(store)
        with store.lock:
            if profile_update.email:
                existing = user_repo.get_by_email(profile_update.email)
                if existing and existing.id != user_id:
                    raise UserAlreadyExistsException(
                        "Email is already in use by another account"
                    )
            user = user_repo.update_profile(
                user_id, **_clean_profile_fields(profile_update)
            )
        logger.info(f"Profile updated for user {user_id}")
        return user

    @staticmethod
    def search_users(
        store: MemStorage, query: str, current_user_id: int
    ) -> List[db_models.User]:
        """Search other users by username, display name or department."""
        return UserRepository(store).search(query, exclude_user_id=current_user_id)

    @staticmethod
    def get_recommended_users(
        store: MemStorage, user_id: int
    ) -> List[db_models.User]:
        """
        Users the caller may want to befriend.

        Excludes the caller, existing friends and anyone with a pending
        request to or from the caller.
        """
        friend_repo = FriendRepository(store)
        excluded = (
            {user_id}
            | friend_repo.get_friend_ids(user_id)
            | friend_repo.get_pending_user_ids(user_id)
        )
        return [u for u in UserRepository(store).get_all() if u.id not in excluded]

    @staticmethod
    def get_user_stats(store: MemStorage, user_id: int) -> schemas.UserStats:
        return schemas.UserStats(
            papers_uploaded=len(
                PaperRepository(store).filter_by({"uploader_id": user_id})
            ),
            discussions_started=len(
                DiscussionPostRepository(store).filter_by({"author_id": user_id})
            ),
            discussion_replies=len(
                DiscussionReplyRepository(store).filter_by({"author_id": user_id})
            ),
            groups_joined=len(
                StudyGroupMemberRepository(store).group_ids_for_user(user_id)
            ),
        )
