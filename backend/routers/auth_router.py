"""Authentication router endpoints."""

from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from repositories.database import get_store
from repositories.memory_store import MemStorage
from services.auth_service import AuthService
from services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register", response_model=schemas.Token, status_code=status.HTTP_201_CREATED
)
def register(
    user: schemas.UserCreate, store: MemStorage = Depends(get_store)
) -> schemas.Token:
    """
    Register a new student account and sign it in.

    Domain exceptions are caught by centralized exception handlers.
    """
    created = UserService.register_user(store, user)
    return AuthService.create_token(created)


@router.post("/login", response_model=schemas.Token)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    store: MemStorage = Depends(get_store),
) -> schemas.Token:
    """Login with username and password."""
    return AuthService.login(store, form_data.username, form_data.password)


@router.post("/logout", response_model=schemas.MessageResponse)
async def logout(
    current_user: db_models.User = Depends(auth.get_current_user),
) -> schemas.MessageResponse:
    """
    Logout.

    Tokens are stateless; the client discards its token.
    """
    return schemas.MessageResponse(message="Logged out successfully")


@router.get("/user", response_model=schemas.User)
async def read_current_user(
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> db_models.User:
    """Get current user."""
    return current_user
