"""
Message Service

Direct messages between two users.
"""

from typing import List

import models.schemas as schemas
import repositories.db_models as db_models
from helpers.sanitization import sanitize_plain_text, sanitize_url
from models.exceptions import (
    InsufficientPermissionsException,
    UserNotFoundException,
    ValidationException,
)
from repositories.chat_repository import DirectMessageRepository
from repositories.memory_store import MemStorage
from repositories.user_repository import UserRepository


class MessageService:
    """Service for direct messages."""

    @staticmethod
    def send_message(
        store: MemStorage, sender_id: int, message_data: schemas.DirectMessageCreate
    ) -> db_models.DirectMessage:
        """
        Raises:
            ValidationException: If the user messages themselves
            UserNotFoundException: If the receiver does not exist
        """
        if message_data.receiver_id == sender_id:
            raise ValidationException("You cannot send a message to yourself")
        if UserRepository(store).get_by_id(message_data.receiver_id) is None:
            raise UserNotFoundException(message_data.receiver_id)

        return DirectMessageRepository(store).create(
            {
                "sender_id": sender_id,
                "receiver_id": message_data.receiver_id,
                "content": sanitize_plain_text(message_data.content),
                "attachment_url": sanitize_url(message_data.attachment_url),
            }
        )

    @staticmethod
    def get_conversation(
        store: MemStorage, user_a: int, user_b: int, viewer_id: int
    ) -> List[db_models.DirectMessage]:
        """
        Messages between two users, oldest first.

        Messages addressed to the viewer are marked read once fetched.

        Raises:
            InsufficientPermissionsException: If the viewer is neither party
        """
        if viewer_id not in (user_a, user_b):
            raise InsufficientPermissionsException(
                "You can only read your own conversations"
            )
        repo = DirectMessageRepository(store)
        other = user_b if viewer_id == user_a else user_a
        repo.mark_read(receiver_id=viewer_id, sender_id=other)
        return repo.get_between(user_a, user_b)
