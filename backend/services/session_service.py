"""
Session Service

Study sessions scheduled inside a group.
"""

from typing import List

from loguru import logger

import models.schemas as schemas
import repositories.db_models as db_models
from helpers.sanitization import sanitize_html, sanitize_plain_text, sanitize_url
from helpers.time_utils import ensure_utc, format_iso8601
from models.exceptions import ValidationException
from repositories.memory_store import MemStorage
from repositories.study_group_repository import (
    StudyGroupMemberRepository,
    StudySessionRepository,
)
from services.activity_service import ActivityService
from services.study_group_service import StudyGroupService


class SessionService:
    """Service for study sessions."""

    @staticmethod
    def create_session(
        store: MemStorage,
        group_id: int,
        session_data: schemas.StudySessionCreate,
        created_by: int,
    ) -> db_models.StudySession:
        """
        Schedule a session in a group.

        Raises:
            StudyGroupNotFoundException: If the group does not exist
            InsufficientPermissionsException: If the caller is not a member
            ValidationException: If the session does not end after it starts
        """
        start_time = ensure_utc(session_data.start_time)
        end_time = ensure_utc(session_data.end_time)
        if end_time <= start_time:
            raise ValidationException("Session must end after it starts")

        with store.atomic(store.study_sessions, store.activities):
            group = StudyGroupService.get_group_or_raise(store, group_id)
            StudyGroupService.require_member(store, group_id, created_by)
            session = StudySessionRepository(store).create(
                {
                    "title": sanitize_plain_text(session_data.title),
                    "description": sanitize_html(session_data.description),
                    "start_time": start_time,
                    "end_time": end_time,
                    "group_id": group_id,
                    "location": sanitize_plain_text(session_data.location),
                    "is_virtual": session_data.is_virtual,
                    "meeting_link": sanitize_url(session_data.meeting_link),
                    "created_by": created_by,
                }
            )
            ActivityService.record(
                store,
                user_id=created_by,
                activity_type=db_models.ActivityType.SESSION_CREATED,
                target_id=session.id,
                target_type="study_session",
                metadata={
                    "title": session.title,
                    "group_name": group.name,
                    "start_time": format_iso8601(session.start_time),
                },
            )

        logger.info(f"Study session {session.id} created in group {group_id}")
        return session

    @staticmethod
    def get_group_sessions(
        store: MemStorage, group_id: int
    ) -> List[db_models.StudySession]:
        return StudySessionRepository(store).get_for_group(group_id)

    @staticmethod
    def get_upcoming_study_sessions(
        store: MemStorage, user_id: int
    ) -> List[db_models.StudySession]:
        """Sessions of the user's groups that have not started, soonest first."""
        group_ids = StudyGroupMemberRepository(store).group_ids_for_user(user_id)
        return StudySessionRepository(store).get_upcoming_for_groups(group_ids)

    @staticmethod
    def get_user_sessions(
        store: MemStorage, user_id: int
    ) -> List[db_models.StudySession]:
        """All sessions of the user's groups, latest start first."""
        group_ids = StudyGroupMemberRepository(store).group_ids_for_user(user_id)
        sessions = StudySessionRepository(store).get_for_groups(group_ids)
        return sorted(sessions, key=lambda s: s.start_time, reverse=True)
