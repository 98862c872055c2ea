"""Direct message endpoints."""

from typing import List

from fastapi import APIRouter, Depends, Query, status

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from repositories.database import get_store
from repositories.memory_store import MemStorage
from services.message_service import MessageService

router = APIRouter(prefix="/messages", tags=["messages"])


@router.post(
    "", response_model=schemas.DirectMessage, status_code=status.HTTP_201_CREATED
)
def send_message(
    message: schemas.DirectMessageCreate,
    current_user: db_models.User = Depends(auth.get_current_active_user),
    store: MemStorage = Depends(get_store),
) -> db_models.DirectMessage:
    return MessageService.send_message(store, current_user.id, message)


@router.get("", response_model=List[schemas.DirectMessage])
def get_messages_between(
    user_id: int = Query(...),
    friend_id: int = Query(...),
    current_user: db_models.User = Depends(auth.get_current_active_user),
    store: MemStorage = Depends(get_store),
) -> List[db_models.DirectMessage]:
    """Conversation between two users; the caller must be one of them."""
    return MessageService.get_conversation(
        store, user_id, friend_id, viewer_id=current_user.id
    )


@router.get("/{user_id}", response_model=List[schemas.DirectMessage])
def get_conversation(
    user_id: int,
    current_user: db_models.User = Depends(auth.get_current_active_user),
    store: MemStorage = Depends(get_store),
) -> List[db_models.DirectMessage]:
    """Conversation between the caller and another user, oldest first."""
    return MessageService.get_conversation(
        store, current_user.id, user_id, viewer_id=current_user.id
    )
