"""Tests for UserRepository."""

import pytest

import repositories.db_models as db_models
from models.exceptions import (
    FirstAdminProtectedException,
    NotFirstAdminException,
    UserNotFoundException,
)
from repositories.memory_store import MemStorage
from repositories.user_repository import UserRepository


def create_user(repo: UserRepository, username: str, **extra) -> db_models.User:
    return repo.create(
        {
            "username": username,
            "email": f"{username}@studysphere.edu",
            "hashed_password": "not-a-real-hash",
            "display_name": username.title(),
            **extra,
        }
    )


class TestUserRepository:
    """Test cases for UserRepository."""

    def test_create_stamps_defaults(self, store: MemStorage):
        user = create_user(UserRepository(store), "alice")

        assert user.role == db_models.UserRole.REGULAR
        assert user.is_admin is False
        assert user.is_banned is False
        assert user.points == 0

    def test_get_by_username_is_case_insensitive(self, store: MemStorage):
        repo = UserRepository(store)
        user = create_user(repo, "Alice")

        assert repo.get_by_username("alice") == user
        assert repo.get_by_username("ALICE") == user
        assert repo.get_by_username("bob") is None

    def test_get_by_email_is_case_insensitive(self, store: MemStorage):
        repo = UserRepository(store)
        user = create_user(repo, "alice")

        assert repo.get_by_email("Alice@StudySphere.edu") == user
        assert repo.get_by_email("nobody@studysphere.edu") is None

    def test_update_profile_ignores_missing_fields(self, store: MemStorage):
        repo = UserRepository(store)
        user = create_user(repo, "alice", bio="Biology student")

        updated = repo.update_profile(user.id, department="Biology", bio=None)

        assert updated.department == "Biology"
        assert updated.bio == "Biology student"
        assert updated.updated_at >= user.updated_at

    def test_update_profile_missing_user(self, store: MemStorage):
        with pytest.raises(UserNotFoundException):
            UserRepository(store).update_profile(5, bio="x")

    def test_ban_and_unban(self, store: MemStorage):
        repo = UserRepository(store)
        user = create_user(repo, "alice")

        banned = repo.set_banned(user.id, True, "spam")
        assert banned.is_banned is True
        assert banned.ban_reason == "spam"
        assert repo.count_banned() == 1
        assert repo.count_active() == 0

        unbanned = repo.set_banned(user.id, False)
        assert unbanned.is_banned is False
        assert unbanned.ban_reason is None

    def test_search_excludes_caller(self, store: MemStorage):
        repo = UserRepository(store)
        alice = create_user(repo, "alice", department="Physics")
        bob = create_user(repo, "bob", department="Physics")

        assert repo.search("physics", exclude_user_id=alice.id) == [bob]


class TestFirstAdmin:
    """Test cases for the first-admin rules."""

    def test_first_admin_is_first_user_created_as_admin(self, store: MemStorage):
        repo = UserRepository(store)
        create_user(repo, "student")
        first = create_user(repo, "root", role=db_models.UserRole.ADMIN)
        create_user(repo, "second", role=db_models.UserRole.ADMIN)

        assert store.first_admin_id == first.id
        assert repo.get_first_admin() == first
        assert repo.is_first_admin(first.id) is True

    def test_no_first_admin_without_admins(self, store: MemStorage):
        repo = UserRepository(store)
        create_user(repo, "student")

        assert repo.get_first_admin() is None

    def test_first_admin_can_grant_admin(self, store: MemStorage):
        repo = UserRepository(store)
        root = create_user(repo, "root", role=db_models.UserRole.ADMIN)
        student = create_user(repo, "student")

        promoted = repo.set_user_as_admin(student.id, root.id)

        assert promoted.is_admin is True
        assert store.first_admin_id == root.id

    def test_other_admin_cannot_grant_admin(self, store: MemStorage):
        repo = UserRepository(store)
        root = create_user(repo, "root", role=db_models.UserRole.ADMIN)
        deputy = create_user(repo, "deputy")
        repo.set_user_as_admin(deputy.id, root.id)
        student = create_user(repo, "student")

        with pytest.raises(NotFirstAdminException):
            repo.set_user_as_admin(student.id, deputy.id)

    def test_first_admin_role_cannot_be_revoked(self, store: MemStorage):
        repo = UserRepository(store)
        root = create_user(repo, "root", role=db_models.UserRole.ADMIN)

        with pytest.raises(FirstAdminProtectedException):
            repo.remove_user_admin(root.id, root.id)

        assert repo.get_by_id(root.id).is_admin is True

    def test_first_admin_can_revoke_other_admin(self, store: MemStorage):
        repo = UserRepository(store)
        root = create_user(repo, "root", role=db_models.UserRole.ADMIN)
        deputy = create_user(repo, "deputy")
        repo.set_user_as_admin(deputy.id, root.id)

        demoted = repo.remove_user_admin(deputy.id, root.id)

        assert demoted.is_admin is False

    def test_unknown_users_raise_not_found(self, store: MemStorage):
        repo = UserRepository(store)
        root = create_user(repo, "root", role=db_models.UserRole.ADMIN)

        with pytest.raises(UserNotFoundException):
            repo.set_user_as_admin(99, root.id)
        with pytest.raises(UserNotFoundException):
            repo.set_user_as_admin(root.id, 99)

    def test_promote_first_admin(self, store: MemStorage):
        repo = UserRepository(store)
        student = create_user(repo, "student")

        promoted = repo.promote_first_admin(student.id)

        assert promoted.is_admin is True
        assert store.first_admin_id == student.id
