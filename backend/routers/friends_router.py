"""Friend request and friend list endpoints."""

from typing import List

from fastapi import APIRouter, Depends, status

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from repositories.database import get_store
from repositories.memory_store import MemStorage
from services.friend_service import FriendService

router = APIRouter(tags=["friends"])


@router.post(
    "/friend-requests",
    response_model=schemas.FriendRequest,
    status_code=status.HTTP_201_CREATED,
)
def send_friend_request(
    request: schemas.FriendRequestCreate,
    current_user: db_models.User = Depends(auth.get_current_active_user),
    store: MemStorage = Depends(get_store),
) -> db_models.FriendRequest:
    return FriendService.send_request(store, current_user.id, request.recipient_id)


@router.get("/friend-requests", response_model=List[schemas.FriendRequestWithSender])
def get_friend_requests(
    current_user: db_models.User = Depends(auth.get_current_active_user),
    store: MemStorage = Depends(get_store),
):
    """Requests the caller sent or received, newest first."""
    return FriendService.get_friend_requests(store, current_user.id)


@router.post(
    "/friend-requests/{request_id}/accept", response_model=schemas.FriendRequest
)
def accept_friend_request(
    request_id: int,
    current_user: db_models.User = Depends(auth.get_current_active_user),
    store: MemStorage = Depends(get_store),
) -> db_models.FriendRequest:
    return FriendService.accept_request(store, request_id, current_user.id)


@router.post(
    "/friend-requests/{request_id}/reject", response_model=schemas.FriendRequest
)
def reject_friend_request(
    request_id: int,
    current_user: db_models.User = Depends(auth.get_current_active_user),
    store: MemStorage = Depends(get_store),
) -> db_models.FriendRequest:
    return FriendService.reject_request(store, request_id, current_user.id)


@router.get("/friends", response_model=List[schemas.Friend])
def get_friends(
    current_user: db_models.User = Depends(auth.get_current_active_user),
    store: MemStorage = Depends(get_store),
):
    return FriendService.get_friends(store, current_user.id)
