"""Admin endpoints: moderation, admin roles and dashboard data."""

from typing import List, Optional

from fastapi import APIRouter, Depends, status

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from helpers.pagination import PaginationLimitLarge, PaginationSkip
from repositories.database import get_store
from repositories.memory_store import MemStorage
from services.admin_service import AdminService
from services.discussion_service import DiscussionService
from services.user_service import UserService

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/users", response_model=List[schemas.User])
def get_all_users(
    skip: PaginationSkip = 0,
    limit: PaginationLimitLarge = 200,
    current_user: db_models.User = Depends(auth.get_admin_user),
    store: MemStorage = Depends(get_store),
) -> List[db_models.User]:
    return UserService.get_all_users(store, skip=skip, limit=limit)


@router.get("/discussions", response_model=List[schemas.DiscussionPostWithAuthor])
def get_all_discussions(
    current_user: db_models.User = Depends(auth.get_admin_user),
    store: MemStorage = Depends(get_store),
):
    """All posts for moderation, newest first."""
    return DiscussionService.get_posts(store)


@router.get("/stats", response_model=schemas.AdminStats)
def get_stats(
    current_user: db_models.User = Depends(auth.get_admin_user),
    store: MemStorage = Depends(get_store),
) -> schemas.AdminStats:
    return AdminService.get_stats(store)


@router.get("/actions", response_model=List[schemas.AdminAction])
def get_actions(
    skip: PaginationSkip = 0,
    limit: PaginationLimitLarge = 200,
    current_user: db_models.User = Depends(auth.get_admin_user),
    store: MemStorage = Depends(get_store),
) -> List[db_models.AdminAction]:
    """Audit log, newest first."""
    return AdminService.get_actions(store, skip=skip, limit=limit)


@router.post("/users/{user_id}/ban", response_model=schemas.User)
def ban_user(
    user_id: int,
    ban: Optional[schemas.BanRequest] = None,
    current_user: db_models.User = Depends(auth.get_admin_user),
    store: MemStorage = Depends(get_store),
) -> db_models.User:
    reason = ban.reason if ban else None
    return AdminService.ban_user(store, user_id, current_user, reason)


@router.post("/users/{user_id}/unban", response_model=schemas.User)
def unban_user(
    user_id: int,
    current_user: db_models.User = Depends(auth.get_admin_user),
    store: MemStorage = Depends(get_store),
) -> db_models.User:
    return AdminService.unban_user(store, user_id, current_user)


@router.delete("/papers/{paper_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_paper(
    paper_id: int,
    current_user: db_models.User = Depends(auth.get_admin_user),
    store: MemStorage = Depends(get_store),
) -> None:
    AdminService.delete_paper(store, paper_id, current_user)


@router.delete("/discussions/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_discussion(
    post_id: int,
    current_user: db_models.User = Depends(auth.get_admin_user),
    store: MemStorage = Depends(get_store),
) -> None:
    AdminService.delete_discussion(store, post_id, current_user)


@router.post("/users/{user_id}/make-admin", response_model=schemas.User)
def make_admin(
    user_id: int,
    current_user: db_models.User = Depends(auth.get_admin_user),
    store: MemStorage = Depends(get_store),
) -> db_models.User:
    """Grant the admin role. Only the first admin may do this."""
    return AdminService.set_user_as_admin(store, user_id, current_user.id)


@router.post("/users/{user_id}/remove-admin", response_model=schemas.User)
def remove_admin(
    user_id: int,
    current_user: db_models.User = Depends(auth.get_admin_user),
    store: MemStorage = Depends(get_store),
) -> db_models.User:
    """Revoke the admin role. Only the first admin may do this; never on themselves."""
    return AdminService.remove_user_admin(store, user_id, current_user.id)


@router.get("/first-admin", response_model=Optional[schemas.UserPublic])
def get_first_admin(
    store: MemStorage = Depends(get_store),
) -> Optional[db_models.User]:
    return AdminService.get_first_admin(store)


@router.post("/setup", response_model=schemas.User)
def setup_admin(store: MemStorage = Depends(get_store)) -> db_models.User:
    """
    Promote the first registered user to admin.

    Only works while no admin exists.
    """
    return AdminService.setup_first_admin(store)
