"""Tests for UserService and AuthService."""

import jwt
import pytest

import models.schemas as schemas
from authentication.auth import verify_password
from models.config import settings
from models.exceptions import (
    InvalidCredentialsException,
    UserAlreadyExistsException,
    UserBannedException,
    UserNotFoundException,
)
from repositories.memory_store import MemStorage
from repositories.user_repository import UserRepository
from services.auth_service import AuthService
from services.discussion_service import DiscussionService
from services.study_group_service import StudyGroupService
from services.user_service import UserService


class TestUserService:
    """Test cases for UserService."""

    def test_register_hashes_password(self, store: MemStorage):
        user = UserService.register_user(
            store,
            schemas.UserCreate(
                username="alice", email="alice@studysphere.edu", password="secret123"
            ),
        )

        assert user.hashed_password != "secret123"
        assert verify_password("secret123", user.hashed_password)
        assert user.display_name == "alice"

    def test_duplicate_username_any_case(self, store: MemStorage, test_user):
        with pytest.raises(UserAlreadyExistsException):
            UserService.register_user(
                store,
                schemas.UserCreate(
                    username="TestUser", email="new@example.com", password="secret123"
                ),
            )

    def test_duplicate_email(self, store: MemStorage, test_user):
        with pytest.raises(UserAlreadyExistsException):
            UserService.register_user(
                store,
                schemas.UserCreate(
                    username="fresh", email=test_user.email, password="secret123"
                ),
            )

    def test_update_profile_partial(self, store: MemStorage, test_user):
        updated = UserService.update_profile(
            store, test_user.id, schemas.UserProfileUpdate(bio="Hi there")
        )

        assert updated.bio == "Hi there"
        assert updated.department == test_user.department

    def test_register_cleans_profile_markup(self, store: MemStorage):
        user = UserService.register_user(
            store,
            schemas.UserCreate(
                username="mallory",
                email="mallory@studysphere.edu",
                password="secret123",
                display_name="<script>alert(1)</script>Mal",
                bio='<p onclick="steal()">Hello</p>',
                institution="<b>R&D</b> Institute",
            ),
        )

        assert "<script>" not in user.display_name
        assert user.display_name.endswith("Mal")
        assert user.bio == "<p>Hello</p>"
        assert user.institution == "R&D Institute"

    def test_register_markup_only_name_falls_back(self, store: MemStorage):
        user = UserService.register_user(
            store,
            schemas.UserCreate(
                username="blankname",
                email="blank@studysphere.edu",
                password="secret123",
                display_name="<i></i>",
            ),
        )

        assert user.display_name == "blankname"

    def test_update_profile_cleans_fields(self, store: MemStorage, test_user):
        updated = UserService.update_profile(
            store,
            test_user.id,
            schemas.UserProfileUpdate(
                display_name="<img src=x onerror=alert(1)>Tess",
                profile_picture="javascript:alert(1)",
                department="<em>Physics</em>",
            ),
        )

        assert updated.display_name == "Tess"
        assert updated.profile_picture == ""
        assert updated.department == "Physics"
        assert updated.bio == test_user.bio

    def test_update_profile_keeps_name_when_only_markup(
        self, store: MemStorage, test_user
    ):
        updated = UserService.update_profile(
            store, test_user.id, schemas.UserProfileUpdate(display_name="<b></b>")
        )

        assert updated.display_name == test_user.display_name

    def test_update_profile_email_taken(
        self, store: MemStorage, test_user, other_user
    ):
        with pytest.raises(UserAlreadyExistsException):
            UserService.update_profile(
                store,
                test_user.id,
                schemas.UserProfileUpdate(email=other_user.email),
            )

    def test_get_user_by_id_or_raise(self, store: MemStorage):
        with pytest.raises(UserNotFoundException):
            UserService.get_user_by_id_or_raise(store, 8)

    def test_search_users(self, store: MemStorage, test_user, other_user):
        results = UserService.search_users(store, "other", test_user.id)

        assert [u.id for u in results] == [other_user.id]

    def test_stats(self, store: MemStorage, test_user):
        post = DiscussionService.create_post(
            store, schemas.DiscussionPostCreate(title="Q", content="?"), test_user.id
        )
        DiscussionService.create_reply(
            store, post.id, schemas.DiscussionReplyCreate(content="A"), test_user.id
        )
        StudyGroupService.create_group(
            store, schemas.StudyGroupCreate(name="G"), test_user.id
        )

        stats = UserService.get_user_stats(store, test_user.id)

        assert stats == schemas.UserStats(
            papers_uploaded=0,
            discussions_started=1,
            discussion_replies=1,
            groups_joined=1,
        )


class TestAuthService:
    """Test cases for AuthService."""

    def test_login_returns_token_for_username(self, store: MemStorage, test_user):
        token = AuthService.login(store, "TESTUSER", "testpassword123")

        payload = jwt.decode(
            token.access_token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
        assert payload["sub"] == test_user.username
        assert token.token_type == "bearer"
        assert token.user.id == test_user.id

    def test_login_wrong_password(self, store: MemStorage, test_user):
        with pytest.raises(InvalidCredentialsException):
            AuthService.login(store, "testuser", "wrong-password")

    def test_login_unknown_user(self, store: MemStorage):
        with pytest.raises(InvalidCredentialsException):
            AuthService.login(store, "ghost", "whatever")

    def test_banned_user_cannot_login(self, store: MemStorage, test_user):
        UserRepository(store).set_banned(test_user.id, True, "cheating")

        with pytest.raises(UserBannedException) as exc_info:
            AuthService.login(store, "testuser", "testpassword123")

        assert "cheating" in exc_info.value.message
