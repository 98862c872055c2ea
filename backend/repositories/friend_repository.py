"""
Friend request and friendship repository.

A friendship is stored once per unordered pair and resolved from either side.
"""

from typing import List, Optional

import repositories.db_models as db_models
from repositories.memory_store import MemStorage

from .base import BaseRepository


class FriendRepository(BaseRepository[db_models.FriendRequest]):
    """Repository for friend requests and the friendships they create."""

    def __init__(self, store: MemStorage):
        super().__init__(store, store.friend_requests)
        self.friendships = store.friendships

    # Requests

    def create_request(
        self, sender_id: int, receiver_id: int
    ) -> db_models.FriendRequest:
        return self.create({"sender_id": sender_id, "receiver_id": receiver_id})

    def get_request_by_id(self, request_id: int) -> Optional[db_models.FriendRequest]:
        return self.get_by_id(request_id)

    def get_request_between(
        self, user_a: int, user_b: int
    ) -> Optional[db_models.FriendRequest]:
        """Any request between the two users, in either direction."""
        return next(
            (
                r
                for r in self.table.values()
                if (r.sender_id == user_a and r.receiver_id == user_b)
                or (r.sender_id == user_b and r.receiver_id == user_a)
            ),
            None,
        )

    def get_requests_for_user(self, user_id: int) -> List[db_models.FriendRequest]:
        """Requests the user sent or received, newest first."""
        requests = [
            r
            for r in self.table.values()
            if r.sender_id == user_id or r.receiver_id == user_id
        ]
        return sorted(requests, key=lambda r: (r.created_at, r.id), reverse=True)

    def get_pending_user_ids(self, user_id: int) -> set[int]:
        """Users with a pending request to or from ``user_id``."""
        pending = set()
        for request in self.table.values():
            if request.status != db_models.FriendRequestStatus.PENDING:
                continue
            if request.sender_id == user_id:
                pending.add(request.receiver_id)
            elif request.receiver_id == user_id:
                pending.add(request.sender_id)
        return pending

    def update_request_status(
        self, request_id: int, status: db_models.FriendRequestStatus
    ) -> db_models.FriendRequest:
        """
        Raises:
            RecordNotFoundException: If the request does not exist
        """
        return self.update(request_id, {"status": status})

    # Friendships

    def create_friendship(self, user1_id: int, user2_id: int) -> db_models.Friendship:
        return self.friendships.insert({"user1_id": user1_id, "user2_id": user2_id})

    def get_friendships_for_user(self, user_id: int) -> List[db_models.Friendship]:
        return [
            f
            for f in self.friendships.values()
            if f.user1_id == user_id or f.user2_id == user_id
        ]

    def get_friend_ids(self, user_id: int) -> set[int]:
        return {f.other_party(user_id) for f in self.get_friendships_for_user(user_id)}

    def are_friends(self, user_a: int, user_b: int) -> bool:
        return user_b in self.get_friend_ids(user_a)
