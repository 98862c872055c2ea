"""Seed the store with the admin account and sample students."""

from urllib.parse import quote

from loguru import logger

import models.schemas as schemas
from models.config import settings
from repositories.db_models import UserRole
from repositories.memory_store import MemStorage
from repositories.user_repository import UserRepository
from services.user_service import UserService

SAMPLE_DEPARTMENTS = [
    "Computer Science",
    "Biology",
    "Mathematics",
    "Physics",
    "Chemistry",
    "Psychology",
    "Business Administration",
    "Engineering",
]


def avatar_for(name: str) -> str:
    """Generated avatar URL for seeded accounts."""
    return f"https://ui-avatars.com/api/?name={quote(name)}&background=random"


def get_sample_users(count: int) -> list[dict]:
    """Get sample account data.

    Departments cycle through ``SAMPLE_DEPARTMENTS`` and years through 1-4,
    so a given count always produces the same accounts.
    """
    users = []
    for i in range(1, count + 1):
        username = f"user{i}"
        department = SAMPLE_DEPARTMENTS[(i - 1) % len(SAMPLE_DEPARTMENTS)]
        year_of_study = (i - 1) % 4 + 1
        users.append(
            {
                "username": username,
                "email": f"{username}@studysphere.edu",
                "password": settings.SEED_SAMPLE_PASSWORD,
                "display_name": f"Test User {i}",
                "institution": settings.SEED_INSTITUTION,
                "department": department,
                "year_of_study": year_of_study,
                "bio": (
                    f"I'm a student in the {department} department, "
                    f"year {year_of_study}."
                ),
            }
        )
    return users


def init_db(store: MemStorage) -> bool:
    """Initialize the store with default data.

    Returns:
        True when accounts were created, False when the store already had users.
    """
    user_repo = UserRepository(store)
    if user_repo.count():
        logger.info("Store already has users; skipping seed data")
        return False

    admin = UserService.register_user(
        store,
        schemas.UserCreate(
            username=settings.ADMIN_USERNAME,
            email=settings.ADMIN_EMAIL,
            password=settings.ADMIN_PASSWORD,
            display_name="Administrator",
            institution=settings.SEED_INSTITUTION,
            department="Computer Science",
            year_of_study=4,
            bio="Administrator of the StudySphere platform",
        ),
        role=UserRole.ADMIN,
    )
    user_repo.update_profile(admin.id, profile_picture=avatar_for("Admin"))
    logger.info(f"Admin user created: {admin.username} ({admin.email})")

    for data in get_sample_users(settings.SEED_SAMPLE_USERS):
        user = UserService.register_user(store, schemas.UserCreate(**data))
        user_repo.update_profile(user.id, profile_picture=avatar_for(user.username))

    logger.info(f"Seed data created: {settings.SEED_SAMPLE_USERS} sample users")
    return True
