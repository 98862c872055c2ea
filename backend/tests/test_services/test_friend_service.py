"""Tests for FriendService and MessageService."""

import pytest

import models.schemas as schemas
import repositories.db_models as db_models
from models.exceptions import (
    AlreadyFriendsException,
    BusinessRuleException,
    FriendRequestExistsException,
    FriendRequestNotFoundException,
    InsufficientPermissionsException,
    UserNotFoundException,
    ValidationException,
)
from repositories.friend_repository import FriendRepository
from repositories.memory_store import MemStorage
from services.friend_service import FriendService
from services.message_service import MessageService
from services.user_service import UserService


class TestFriendService:
    """Test cases for friend requests."""

    def test_send_request(self, store: MemStorage, test_user, other_user):
        request = FriendService.send_request(store, test_user.id, other_user.id)

        assert request.sender_id == test_user.id
        assert request.receiver_id == other_user.id
        assert request.status == db_models.FriendRequestStatus.PENDING

    def test_cannot_befriend_self(self, store: MemStorage, test_user):
        with pytest.raises(ValidationException):
            FriendService.send_request(store, test_user.id, test_user.id)

    def test_unknown_recipient(self, store: MemStorage, test_user):
        with pytest.raises(UserNotFoundException):
            FriendService.send_request(store, test_user.id, 404)

    def test_reverse_request_is_duplicate(
        self, store: MemStorage, test_user, other_user
    ):
        FriendService.send_request(store, test_user.id, other_user.id)

        with pytest.raises(FriendRequestExistsException):
            FriendService.send_request(store, other_user.id, test_user.id)

    def test_accept_creates_symmetric_friendship(
        self, store: MemStorage, test_user, other_user
    ):
        request = FriendService.send_request(store, test_user.id, other_user.id)

        accepted = FriendService.accept_request(store, request.id, other_user.id)

        assert accepted.status == db_models.FriendRequestStatus.ACCEPTED
        assert len(store.friendships) == 1
        mine = FriendService.get_friends(store, test_user.id)
        theirs = FriendService.get_friends(store, other_user.id)
        assert [f["friend_id"] for f in mine] == [other_user.id]
        assert [f["friend_id"] for f in theirs] == [test_user.id]
        assert mine[0]["friend_name"] == "Other User"
        assert mine[0]["friendship"]["id"] == theirs[0]["friendship"]["id"]

    def test_already_friends(self, store: MemStorage, test_user, other_user):
        FriendRepository(store).create_friendship(test_user.id, other_user.id)

        with pytest.raises(AlreadyFriendsException):
            FriendService.send_request(store, test_user.id, other_user.id)

    def test_only_recipient_responds(self, store: MemStorage, test_user, other_user):
        request = FriendService.send_request(store, test_user.id, other_user.id)

        with pytest.raises(InsufficientPermissionsException):
            FriendService.accept_request(store, request.id, test_user.id)

    def test_cannot_answer_twice(self, store: MemStorage, test_user, other_user):
        request = FriendService.send_request(store, test_user.id, other_user.id)
        FriendService.reject_request(store, request.id, other_user.id)

        with pytest.raises(BusinessRuleException):
            FriendService.accept_request(store, request.id, other_user.id)
        assert len(store.friendships) == 0

    def test_missing_request(self, store: MemStorage, test_user):
        with pytest.raises(FriendRequestNotFoundException):
            FriendService.reject_request(store, 12, test_user.id)

    def test_requests_include_sender(self, store: MemStorage, test_user, other_user):
        FriendService.send_request(store, test_user.id, other_user.id)

        requests = FriendService.get_friend_requests(store, other_user.id)

        assert requests[0]["sender_name"] == "Test User"

    def test_recommended_excludes_friends_and_pending(
        self, store: MemStorage, test_user, other_user, user_factory
    ):
        pending = user_factory("pending")
        stranger = user_factory("stranger")
        FriendRepository(store).create_friendship(test_user.id, other_user.id)
        FriendService.send_request(store, pending.id, test_user.id)

        recommended = UserService.get_recommended_users(store, test_user.id)

        assert [u.id for u in recommended] == [stranger.id]


class TestMessageService:
    """Test cases for direct messages."""

    def test_conversation_marks_incoming_read(
        self, store: MemStorage, test_user, other_user
    ):
        MessageService.send_message(
            store,
            other_user.id,
            schemas.DirectMessageCreate(receiver_id=test_user.id, content="hi"),
        )
        MessageService.send_message(
            store,
            test_user.id,
            schemas.DirectMessageCreate(receiver_id=other_user.id, content="hey"),
        )

        conversation = MessageService.get_conversation(
            store, test_user.id, other_user.id, viewer_id=test_user.id
        )

        assert [m.content for m in conversation] == ["hi", "hey"]
        assert [m.is_read for m in conversation] == [True, False]

    def test_outsider_cannot_read(
        self, store: MemStorage, test_user, other_user, user_factory
    ):
        outsider = user_factory("outsider")

        with pytest.raises(InsufficientPermissionsException):
            MessageService.get_conversation(
                store, test_user.id, other_user.id, viewer_id=outsider.id
            )

    def test_unsafe_attachment_url_is_dropped(
        self, store: MemStorage, test_user, other_user
    ):
        message = MessageService.send_message(
            store,
            test_user.id,
            schemas.DirectMessageCreate(
                receiver_id=other_user.id,
                content="look",
                attachment_url="javascript:alert(1)",
            ),
        )

        assert message.attachment_url == ""

    def test_message_to_unknown_user(self, store: MemStorage, test_user):
        with pytest.raises(UserNotFoundException):
            MessageService.send_message(
                store,
                test_user.id,
                schemas.DirectMessageCreate(receiver_id=77, content="hello?"),
            )
