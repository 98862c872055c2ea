"""
Authentication Service

Handles authentication business logic including login and token management.
"""

from datetime import timedelta

from loguru import logger

import models.schemas as schemas
import repositories.db_models as db_models
from authentication.auth import authenticate_user, create_access_token
from models.config import settings
from models.exceptions import InvalidCredentialsException, UserBannedException
from repositories.memory_store import MemStorage


class AuthService:
    """Service for authentication business logic."""

    @staticmethod
    def create_token(user: db_models.User) -> schemas.Token:
        access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        access_token = create_access_token(
            data={"sub": user.username}, expires_delta=access_token_expires
        )
        # nosec B106: "bearer" is OAuth2 token type, not a password
        return schemas.Token(
            access_token=access_token,
            token_type="bearer",  # nosec B106
            user=schemas.User.model_validate(user),
        )

    @staticmethod
    def login(store: MemStorage, username: str, password: str) -> schemas.Token:
        """
        Authenticate a user and create an access token.

        Args:
            store: Entity store
            username: Username (case-insensitive)
            password: Plain password

        Returns:
            Token with the signed-in user

        Raises:
            InvalidCredentialsException: If username or password is incorrect
            UserBannedException: If the account is banned
        """
        user = authenticate_user(store, username, password)
        if not user:
            logger.warning(f"Failed login attempt for username {username!r}")
            raise InvalidCredentialsException()

        if user.is_banned:
            logger.warning(f"Banned user {user.id} attempted to log in")
            raise UserBannedException(user.ban_reason)

        logger.info(f"User {user.id} logged in")
        return AuthService.create_token(user)
