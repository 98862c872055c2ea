"""
Admin Service

Moderation (bans, content removal), admin-role management and dashboard
statistics. Every moderation action is written to the audit log.

Admin roles follow a small state machine: the first user ever stored with the
admin role is the first admin. Only the first admin may grant or revoke the
admin role, and the first admin's own role can never be revoked.
"""

from typing import List, Optional

from loguru import logger

import models.schemas as schemas
import repositories.db_models as db_models
from models.exceptions import (
    AdminAlreadyExistsException,
    InsufficientPermissionsException,
    NotFoundException,
)
from repositories.activity_repository import ActivityRepository
from repositories.admin_action_repository import AdminActionRepository
from repositories.discussion_repository import DiscussionPostRepository
from repositories.memory_store import MemStorage
from repositories.paper_repository import PaperRepository
from repositories.study_group_repository import (
    StudyGroupRepository,
    StudySessionRepository,
)
from repositories.user_repository import UserRepository

RECENT_ACTIVITY_COUNT = 10


class AdminService:
    """Service for admin operations."""

    @staticmethod
    def _require_admin(admin: db_models.User) -> None:
        if not admin.is_admin:
            logger.warning(f"Non-admin user {admin.id} attempted an admin action")
            raise InsufficientPermissionsException("Admin permissions required")

    @staticmethod
    def get_stats(store: MemStorage) -> schemas.AdminStats:
        user_repo = UserRepository(store)
        return schemas.AdminStats(
            total_users=user_repo.count(),
            active_users=user_repo.count_active(),
            banned_users=user_repo.count_banned(),
            total_papers=PaperRepository(store).count(),
            total_discussions=DiscussionPostRepository(store).count(),
            total_groups=StudyGroupRepository(store).count(),
            total_sessions=StudySessionRepository(store).count(),
            recent_activities=[
                schemas.Activity.model_validate(activity)
                for activity in ActivityRepository(store).get_recent(
                    RECENT_ACTIVITY_COUNT
                )
            ],
        )

    @staticmethod
    def get_actions(
        store: MemStorage, skip: int = 0, limit: Optional[int] = None
    ) -> List[db_models.AdminAction]:
        return AdminActionRepository(store).get_all(skip=skip, limit=limit)

    # Bans

    @staticmethod
    def ban_user(
        store: MemStorage,
        user_id: int,
        admin: db_models.User,
        reason: Optional[str] = None,
    ) -> db_models.User:
        """
        Ban a user and record the action.

        Raises:
            InsufficientPermissionsException: If the caller is not an admin
            UserNotFoundException: If the user does not exist
        """
        AdminService._require_admin(admin)
        with store.atomic(store.users, store.admin_actions):
            user = UserRepository(store).set_banned(user_id, True, reason)
            AdminActionRepository(store).record(
                admin_id=admin.id,
                action=db_models.AdminActionType.BAN,
                target_type=db_models.AdminTargetType.USER,
                target_id=user_id,
                reason=reason,
            )
        logger.info(f"User {user_id} banned by admin {admin.id}")
        return user

    @staticmethod
    def unban_user(
        store: MemStorage, user_id: int, admin: db_models.User
    ) -> db_models.User:
        AdminService._require_admin(admin)
        with store.atomic(store.users, store.admin_actions):
            user = UserRepository(store).set_banned(user_id, False)
            AdminActionRepository(store).record(
                admin_id=admin.id,
                action=db_models.AdminActionType.UNBAN,
                target_type=db_models.AdminTargetType.USER,
                target_id=user_id,
            )
        logger.info(f"User {user_id} unbanned by admin {admin.id}")
        return user

    # Content removal

    @staticmethod
    def delete_paper(store: MemStorage, paper_id: int, admin: db_models.User) -> None:
        """
        Raises:
            PaperNotFoundException: If the paper does not exist
        """
        AdminService._require_admin(admin)
        with store.atomic(store.papers, store.admin_actions):
            PaperRepository(store).delete(paper_id)
            AdminActionRepository(store).record(
                admin_id=admin.id,
                action=db_models.AdminActionType.DELETE,
                target_type=db_models.AdminTargetType.PAPER,
                target_id=paper_id,
            )
        logger.info(f"Paper {paper_id} deleted by admin {admin.id}")

    @staticmethod
    def delete_discussion(
        store: MemStorage, post_id: int, admin: db_models.User
    ) -> None:
        """
        Raises:
            DiscussionPostNotFoundException: If the post does not exist
        """
        AdminService._require_admin(admin)
        with store.atomic(store.discussion_posts, store.admin_actions):
            DiscussionPostRepository(store).delete(post_id)
            AdminActionRepository(store).record(
                admin_id=admin.id,
                action=db_models.AdminActionType.DELETE,
                target_type=db_models.AdminTargetType.DISCUSSION,
                target_id=post_id,
            )
        logger.info(f"Discussion post {post_id} deleted by admin {admin.id}")

    # Admin roles

    @staticmethod
    def set_user_as_admin(
        store: MemStorage, user_id: int, admin_id: int
    ) -> db_models.User:
        """
        Grant the admin role.

        Raises:
            UserNotFoundException: If either user does not exist
            NotFirstAdminException: If the caller is not the first admin
        """
        with store.atomic(store.users, store.admin_actions):
            user = UserRepository(store).set_user_as_admin(user_id, admin_id)
            AdminActionRepository(store).record(
                admin_id=admin_id,
                action=db_models.AdminActionType.GRANT_ADMIN,
                target_type=db_models.AdminTargetType.USER,
                target_id=user_id,
            )
        logger.info(f"Admin role granted to user {user_id} by {admin_id}")
        return user

    @staticmethod
    def remove_user_admin(
        store: MemStorage, user_id: int, admin_id: int
    ) -> db_models.User:
        """
        Revoke the admin role.

        Raises:
            UserNotFoundException: If either user does not exist
            NotFirstAdminException: If the caller is not the first admin
            FirstAdminProtectedException: If the target is the first admin
        """
        with store.atomic(store.users, store.admin_actions):
            user = UserRepository(store).remove_user_admin(user_id, admin_id)
            AdminActionRepository(store).record(
                admin_id=admin_id,
                action=db_models.AdminActionType.REVOKE_ADMIN,
                target_type=db_models.AdminTargetType.USER,
                target_id=user_id,
            )
        logger.info(f"Admin role revoked from user {user_id} by {admin_id}")
        return user

    @staticmethod
    def get_first_admin(store: MemStorage) -> Optional[db_models.User]:
        return UserRepository(store).get_first_admin()

    @staticmethod
    def setup_first_admin(store: MemStorage) -> db_models.User:
        """
        Promote the earliest registered user when no admin exists.

        Raises:
            AdminAlreadyExistsException: If any user already has the admin role
            NotFoundException: If there are no users
        """
        user_repo = UserRepository(store)
        with store.lock:
            if user_repo.get_admins():
                logger.warning("Admin setup refused: an admin already exists")
                raise AdminAlreadyExistsException()
            users = user_repo.get_all(limit=1)
            if not users:
                raise NotFoundException("No users found")
            user = user_repo.promote_first_admin(users[0].id)
        logger.info(f"User {user.id} promoted to first admin by setup")
        return user
