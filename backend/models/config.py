import json
import os
import sys
from typing import Annotated, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


def _should_load_env_file() -> str | None:
    """Determine if .env should be loaded.

    Local development picks up `backend/.env` automatically. Under pytest or
    in CI the file is ignored so tests control the environment themselves.
    """
    if any("pytest" in str(x) for x in sys.argv if x):
        return None
    if os.environ.get("CI") in ("1", "true", "True"):
        return None
    return ".env"


class Settings(BaseSettings):
    # Environment configuration
    ENVIRONMENT: str = Field(
        default="development",
        description="Environment: 'development', 'test', 'staging' or 'production'",
    )

    SECRET_KEY: str = Field(
        ...,  # Required, no default
        description="JWT secret key - must be set via SECRET_KEY environment variable",
    )
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    CORS_ORIGINS: Annotated[List[str], NoDecode] = Field(
        default=["http://localhost:5173"],
        description="Allowed CORS origins (comma-separated in env var)",
    )

    # Seed account (used by init_db.py at startup)
    ADMIN_USERNAME: str = Field(
        default="admin",
        description="Username of the seeded administrator (the first admin)",
    )
    ADMIN_EMAIL: str = Field(
        default="admin@studysphere.edu",
        description="Email of the seeded administrator",
    )
    ADMIN_PASSWORD: str = Field(
        ...,  # Required, no default
        description="Admin password - must be set via ADMIN_PASSWORD environment variable",
    )

    SEED_ON_STARTUP: bool = Field(
        default=True,
        description="Seed the in-memory store with the admin and sample accounts on startup",
    )
    SEED_SAMPLE_USERS: int = Field(
        default=15,
        ge=0,
        description="Number of sample student accounts created by the seed routine",
    )
    SEED_SAMPLE_PASSWORD: str = Field(
        default="password123",
        description="Password shared by the seeded sample accounts",
    )
    SEED_INSTITUTION: str = Field(
        default="StudySphere University",
        description="Institution assigned to seeded accounts",
    )

    # Performance settings
    SLOW_REQUEST_THRESHOLD: float = Field(
        default=1.0,
        description="Log warning for requests slower than this (seconds)",
    )

    # Uploads
    UPLOAD_DIR: str = Field(
        default="data/uploads",
        description="Directory where uploaded papers and resources are written",
    )
    MAX_UPLOAD_SIZE_MB: int = Field(
        default=10,
        description="Maximum upload size in megabytes",
    )
    ALLOWED_UPLOAD_EXTENSIONS: Annotated[List[str], NoDecode] = Field(
        default=[".pdf", ".doc", ".docx", ".ppt", ".pptx", ".txt", ".jpg", ".png"],
        description="Accepted file extensions for uploads (comma-separated in env var)",
    )

    # Presentation defaults
    DEFAULT_AVATAR_URL: str = Field(
        default="/default-avatar.png",
        description="Avatar returned for authors without a profile picture",
    )
    CHAT_DEFAULT_LIMIT: int = Field(
        default=50,
        description="Number of trailing group chat messages returned by default",
    )
    SEARCH_DEFAULT_LIMIT: int = Field(
        default=10,
        description="Default number of results for the unified search endpoint",
    )

    @field_validator("CORS_ORIGINS", "ALLOWED_UPLOAD_EXTENSIONS", mode="before")
    @classmethod
    def parse_comma_separated(cls, v: str | List[str]) -> List[str]:
        """Parse list settings from a comma-separated string or a JSON array."""
        if not isinstance(v, str):
            return v
        if v.lstrip().startswith("["):
            return json.loads(v)
        return [item.strip() for item in v.split(",") if item.strip()]

    @property
    def max_upload_size_bytes(self) -> int:
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    model_config = SettingsConfigDict(
        env_file=_should_load_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",  # Allow extra env vars (e.g., SENTRY_DSN) without validation errors
    )


# Instantiating Settings() raises pydantic.ValidationError if a required secret is missing.
settings = Settings()  # type: ignore[call-arg]
