"""
User repository for store operations.

Also holds the first-admin state: the id of the first user ever stored with
the admin role. It is assigned once and only these methods may change a user's
role.
"""

from typing import Any, List, Optional

import repositories.db_models as db_models
from helpers.time_utils import utc_now
from models.exceptions import (
    FirstAdminProtectedException,
    NotFirstAdminException,
    UserNotFoundException,
)
from repositories.memory_store import MemStorage

from .base import BaseRepository


class UserRepository(BaseRepository[db_models.User]):
    """Repository for User entity store operations."""

    def __init__(self, store: MemStorage):
        """
        Initialize user repository.

        Args:
            store: Entity store
        """
        super().__init__(store, store.users)

    def create(self, data: dict[str, Any]) -> db_models.User:
        """
        Create a user.

        The first user created with the admin role becomes the first admin.
        """
        with self.store.lock:
            user = super().create(data)
            if user.is_admin and self.store.first_admin_id is None:
                self.store.first_admin_id = user.id
            return user

    def get_by_email(self, email: str) -> Optional[db_models.User]:
        """
        Get user by email (case-insensitive).

        Args:
            email: User email

        Returns:
            User if found, None otherwise
        """
        wanted = email.lower()
        return next(
            (u for u in self.table.values() if u.email.lower() == wanted), None
        )

    def get_by_username(self, username: str) -> Optional[db_models.User]:
        """
        Get user by username (case-insensitive).

        Args:
            username: Username

        Returns:
            User if found, None otherwise
        """
        wanted = username.lower()
        return next(
            (u for u in self.table.values() if u.username.lower() == wanted), None
        )

    def update(self, id: int, changes: dict[str, Any]) -> db_models.User:
        """Shallow-merge changes and stamp ``updated_at``."""
        return super().update(id, {**changes, "updated_at": utc_now()})

    def update_profile(self, user_id: int, **fields: Any) -> db_models.User:
        """
        Update only the provided (non-None) profile fields.

        Raises:
            UserNotFoundException: If the user does not exist
        """
        if self.get_by_id(user_id) is None:
            raise UserNotFoundException(user_id)
        changes = {k: v for k, v in fields.items() if v is not None}
        return self.update(user_id, changes)

    def set_banned(
        self, user_id: int, banned: bool, reason: Optional[str] = None
    ) -> db_models.User:
        """
        Toggle the banned flag. Clearing a ban also clears its reason.

        Raises:
            UserNotFoundException: If the user does not exist
        """
        with self.store.lock:
            if self.get_by_id(user_id) is None:
                raise UserNotFoundException(user_id)
            return self.update(
                user_id,
                {"is_banned": banned, "ban_reason": reason if banned else None},
            )

    def count_banned(self) -> int:
        return sum(1 for u in self.table.values() if u.is_banned)

    def count_active(self) -> int:
        return sum(1 for u in self.table.values() if not u.is_banned)

    def get_admins(self) -> List[db_models.User]:
        return [u for u in self.table.values() if u.is_admin]

    def search(
        self, query: str, exclude_user_id: Optional[int] = None
    ) -> List[db_models.User]:
        """
        Search users by username, display name or department.

        Args:
            query: Free-text query
            exclude_user_id: User left out of the results (usually the caller)

        Returns:
            Matching users, username matches first
        """
        candidates = [u for u in self.table.values() if u.id != exclude_user_id]
        return self._search(
            query,
            fields=("username", "display_name", "department"),
            primary="username",
            tie_break=lambda records: records,
            records=candidates,
        )

    # First admin

    def get_first_admin(self) -> Optional[db_models.User]:
        first_admin_id = self.store.first_admin_id
        if first_admin_id is None:
            return None
        return self.get_by_id(first_admin_id)

    def is_first_admin(self, user_id: int) -> bool:
        return (
            self.store.first_admin_id is not None
            and self.store.first_admin_id == user_id
        )

    def promote_first_admin(self, user_id: int) -> db_models.User:
        """
        Make a user admin when no first admin exists yet.

        Used by bootstrap setup; the caller checks that no admin exists.

        Raises:
            UserNotFoundException: If the user does not exist
        """
        with self.store.lock:
            if self.get_by_id(user_id) is None:
                raise UserNotFoundException(user_id)
            user = self.update(user_id, {"role": db_models.UserRole.ADMIN})
            if self.store.first_admin_id is None:
                self.store.first_admin_id = user.id
            return user

    def set_user_as_admin(self, user_id: int, admin_id: int) -> db_models.User:
        """
        Grant the admin role.

        Args:
            user_id: Target user
            admin_id: Caller; must be the first admin

        Raises:
            UserNotFoundException: If either user does not exist
            NotFirstAdminException: If the caller is not the first admin
        """
        with self.store.lock:
            self._check_first_admin_caller(user_id, admin_id)
            return self.update(user_id, {"role": db_models.UserRole.ADMIN})

    def remove_user_admin(self, user_id: int, admin_id: int) -> db_models.User:
        """
        Revoke the admin role.

        Args:
            user_id: Target user
            admin_id: Caller; must be the first admin

        Raises:
            UserNotFoundException: If either user does not exist
            NotFirstAdminException: If the caller is not the first admin
            FirstAdminProtectedException: If the target is the first admin
        """
        with self.store.lock:
            self._check_first_admin_caller(user_id, admin_id)
            if self.is_first_admin(user_id):
                raise FirstAdminProtectedException()
            return self.update(user_id, {"role": db_models.UserRole.REGULAR})

    def _check_first_admin_caller(self, user_id: int, admin_id: int) -> None:
        if self.get_by_id(admin_id) is None:
            raise UserNotFoundException(admin_id)
        if self.get_by_id(user_id) is None:
            raise UserNotFoundException(user_id)
        if not self.is_first_admin(admin_id):
            raise NotFirstAdminException()
