"""User profile, discovery and statistics endpoints."""

from typing import List

from fastapi import APIRouter, Depends, Query

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from repositories.database import get_store
from repositories.memory_store import MemStorage
from services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.put("/profile", response_model=schemas.User)
def update_profile(
    profile_update: schemas.UserProfileUpdate,
    current_user: db_models.User = Depends(auth.get_current_active_user),
    store: MemStorage = Depends(get_store),
) -> db_models.User:
    """Update the caller's profile; only provided fields change."""
    return UserService.update_profile(store, current_user.id, profile_update)


@router.get("/search", response_model=List[schemas.UserPublic])
def search_users(
    q: str = Query(..., min_length=1, description="Username, name or department"),
    current_user: db_models.User = Depends(auth.get_current_active_user),
    store: MemStorage = Depends(get_store),
) -> List[db_models.User]:
    return UserService.search_users(store, q, current_user.id)


@router.get("/recommended", response_model=List[schemas.UserPublic])
def get_recommended_users(
    current_user: db_models.User = Depends(auth.get_current_active_user),
    store: MemStorage = Depends(get_store),
) -> List[db_models.User]:
    """Users who are not friends with the caller and have no pending request."""
    return UserService.get_recommended_users(store, current_user.id)


@router.get("/stats", response_model=schemas.UserStats)
def get_user_stats(
    current_user: db_models.User = Depends(auth.get_current_active_user),
    store: MemStorage = Depends(get_store),
) -> schemas.UserStats:
    return UserService.get_user_stats(store, current_user.id)
