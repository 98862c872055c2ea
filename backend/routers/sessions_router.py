"""Study session endpoints across all of the caller's groups."""

from typing import List

from fastapi import APIRouter, Depends

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from repositories.database import get_store
from repositories.memory_store import MemStorage
from services.session_service import SessionService

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.get("/upcoming", response_model=List[schemas.StudySession])
def get_upcoming_sessions(
    current_user: db_models.User = Depends(auth.get_current_active_user),
    store: MemStorage = Depends(get_store),
) -> List[db_models.StudySession]:
    """Sessions of the caller's groups that have not started, soonest first."""
    return SessionService.get_upcoming_study_sessions(store, current_user.id)


@router.get("", response_model=List[schemas.StudySession])
def get_my_sessions(
    current_user: db_models.User = Depends(auth.get_current_active_user),
    store: MemStorage = Depends(get_store),
) -> List[db_models.StudySession]:
    """All sessions of the caller's groups, latest start first."""
    return SessionService.get_user_sessions(store, current_user.id)
