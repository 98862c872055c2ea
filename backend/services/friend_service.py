"""
Friend Service

Friend requests and the symmetric friendships they create.
"""

from typing import Any, List

from loguru import logger

import repositories.db_models as db_models
from helpers.user_display import avatar_url, display_name
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
from repositories.user_repository import UserRepository


class FriendService:
    """Service for friend requests and friendships."""

    @staticmethod
    def send_request(
        store: MemStorage, sender_id: int, recipient_id: int
    ) -> db_models.FriendRequest:
        """
        Send a friend request.

        Raises:
            ValidationException: If the user sends a request to themselves
            UserNotFoundException: If the recipient does not exist
            FriendRequestExistsException: If any request between the two exists
            AlreadyFriendsException: If the two are already friends
        """
        if sender_id == recipient_id:
            raise ValidationException("You cannot send a friend request to yourself")

        friend_repo = FriendRepository(store)
        with store.lock:
            if UserRepository(store).get_by_id(recipient_id) is None:
                raise UserNotFoundException(recipient_id)
            if friend_repo.get_request_between(sender_id, recipient_id):
                raise FriendRequestExistsException()
            if friend_repo.are_friends(sender_id, recipient_id):
                raise AlreadyFriendsException()
            request = friend_repo.create_request(sender_id, recipient_id)

        logger.info(f"Friend request {request.id}: {sender_id} -> {recipient_id}")
        return request

    @staticmethod
    def get_friend_requests(store: MemStorage, user_id: int) -> List[dict[str, Any]]:
        """Requests sent or received by the user, with the sender's name and avatar."""
        user_repo = UserRepository(store)
        views = []
        for request in FriendRepository(store).get_requests_for_user(user_id):
            sender = user_repo.get_by_id(request.sender_id)
            views.append(
                {
                    **request.model_dump(),
                    "sender_name": display_name(sender),
                    "sender_avatar": avatar_url(sender),
                }
            )
        return views

    @staticmethod
    def _get_pending_for_receiver(
        friend_repo: FriendRepository, request_id: int, user_id: int
    ) -> db_models.FriendRequest:
        request = friend_repo.get_request_by_id(request_id)
        if request is None:
            raise FriendRequestNotFoundException(request_id)
        if request.receiver_id != user_id:
            raise InsufficientPermissionsException(
                "Only the recipient can respond to this request"
            )
        if request.status != db_models.FriendRequestStatus.PENDING:
            raise BusinessRuleException(
                f"Friend request already {request.status.value}"
            )
        return request

    @staticmethod
    def accept_request(
        store: MemStorage, request_id: int, user_id: int
    ) -> db_models.FriendRequest:
        """
        Accept a pending request and create the friendship.

        The status change and the friendship are written as one unit.

        Raises:
            FriendRequestNotFoundException: If the request does not exist
            InsufficientPermissionsException: If the caller is not the receiver
            BusinessRuleException: If the request is no longer pending
        """
        friend_repo = FriendRepository(store)
        with store.atomic(store.friend_requests, store.friendships):
            request = FriendService._get_pending_for_receiver(
                friend_repo, request_id, user_id
            )
            updated = friend_repo.update_request_status(
                request_id, db_models.FriendRequestStatus.ACCEPTED
            )
            if not friend_repo.are_friends(request.sender_id, request.receiver_id):
                friend_repo.create_friendship(request.sender_id, request.receiver_id)

        logger.info(f"Friend request {request_id} accepted")
        return updated

    @staticmethod
    def reject_request(
        store: MemStorage, request_id: int, user_id: int
    ) -> db_models.FriendRequest:
        friend_repo = FriendRepository(store)
        with store.lock:
            FriendService._get_pending_for_receiver(friend_repo, request_id, user_id)
            updated = friend_repo.update_request_status(
                request_id, db_models.FriendRequestStatus.REJECTED
            )
        logger.info(f"Friend request {request_id} rejected")
        return updated

    @staticmethod
    def get_friends(store: MemStorage, user_id: int) -> List[dict[str, Any]]:
        """
        Resolve the user's friendships to the other party.

        Friendships whose other user no longer exists are skipped.
        """
        user_repo = UserRepository(store)
        friends = []
        for friendship in FriendRepository(store).get_friendships_for_user(user_id):
            friend_id = friendship.other_party(user_id)
            friend = user_repo.get_by_id(friend_id)
            if friend is None:
                continue
            friends.append(
                {
                    "id": friend.id,
                    "user_id": user_id,
                    "friend_id": friend_id,
                    "friend_name": display_name(friend),
                    "friend_avatar": avatar_url(friend),
                    "friendship": {
                        "id": friendship.id,
                        "created_at": friendship.created_at,
                    },
                }
            )
        return friends
