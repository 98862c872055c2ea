"""Activity feed endpoints."""

from typing import List

from fastapi import APIRouter, Depends

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from helpers.pagination import FeedLimit
from models.exceptions import InsufficientPermissionsException
from repositories.database import get_store
from repositories.memory_store import MemStorage
from services.activity_service import ActivityService

router = APIRouter(prefix="/activities", tags=["activities"])


@router.get("", response_model=List[schemas.Activity])
def get_recent_activities(
    limit: FeedLimit = None,
    store: MemStorage = Depends(get_store),
) -> List[db_models.Activity]:
    """Latest activity of all users, newest first."""
    return ActivityService.get_recent(store, limit)


@router.get("/user/{user_id}", response_model=List[schemas.Activity])
def get_user_activities(
    user_id: int,
    limit: FeedLimit = None,
    current_user: db_models.User = Depends(auth.get_current_active_user),
    store: MemStorage = Depends(get_store),
) -> List[db_models.Activity]:
    """A user's own activity. Users may only read their own feed."""
    if user_id != current_user.id:
        raise InsufficientPermissionsException(
            "You are not authorized to view these activities"
        )
    return ActivityService.get_for_user(store, user_id, limit)
