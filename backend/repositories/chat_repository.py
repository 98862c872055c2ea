"""
Chat repositories: group chat and direct messages.
"""

from typing import List, Optional

import repositories.db_models as db_models
from repositories.memory_store import MemStorage

from .base import BaseRepository


class GroupChatRepository(BaseRepository[db_models.GroupChatMessage]):
    """Messages posted in a study group's chat."""

    def __init__(self, store: MemStorage):
        super().__init__(store, store.group_chat_messages)

    def get_for_group(
        self, group_id: int, limit: Optional[int] = None
    ) -> List[db_models.GroupChatMessage]:
        """
        Messages of a group, oldest first.

        Args:
            group_id: Study group ID
            limit: Keep only the last ``limit`` messages

        Returns:
            Messages ordered by timestamp
        """
        messages = sorted(
            self.filter_by({"group_id": group_id}), key=lambda m: m.timestamp
        )
        if limit is not None:
            messages = messages[-limit:] if limit > 0 else []
        return messages


class DirectMessageRepository(BaseRepository[db_models.DirectMessage]):
    """One-to-one messages between users."""

    def __init__(self, store: MemStorage):
        super().__init__(store, store.direct_messages)

    def get_between(
        self, user_a: int, user_b: int
    ) -> List[db_models.DirectMessage]:
        """Conversation between two users in either direction, oldest first."""
        pair = {user_a, user_b}
        conversation = [
            m
            for m in self.table.values()
            if {m.sender_id, m.receiver_id} == pair
        ]
        return sorted(conversation, key=lambda m: m.created_at)

    def mark_read(self, receiver_id: int, sender_id: int) -> int:
        """
        Mark every unread message from ``sender_id`` to ``receiver_id`` as read.

        Returns:
            Number of messages updated
        """
        with self.store.lock:
            unread = self.filter_by(
                {"sender_id": sender_id, "receiver_id": receiver_id, "is_read": False}
            )
            for message in unread:
                self.update(message.id, {"is_read": True})
            return len(unread)
