"""
Study group repositories: groups, memberships and sessions.
"""

from typing import List, Optional, Set

import repositories.db_models as db_models
from helpers.time_utils import utc_now
from repositories.memory_store import MemStorage

from .base import BaseRepository, newest_first


class StudyGroupRepository(BaseRepository[db_models.StudyGroup]):
    """Repository for study groups."""

    def __init__(self, store: MemStorage):
        super().__init__(store, store.study_groups)

    def get_by_ids(self, group_ids: Set[int]) -> List[db_models.StudyGroup]:
        return [g for g in self.table.values() if g.id in group_ids]

    def search(
        self, query: str, limit: Optional[int] = None
    ) -> List[db_models.StudyGroup]:
        """
        Search groups.

        Name matches first, then most recently created.
        """
        return self._search(
            query,
            fields=("name", "description", "course"),
            primary="name",
            tie_break=newest_first("created_at"),
            limit=limit,
        )


class StudyGroupMemberRepository(BaseRepository[db_models.StudyGroupMember]):
    """Repository for group membership rows."""

    def __init__(self, store: MemStorage):
        super().__init__(store, store.study_group_members)

    def add(
        self, group_id: int, user_id: int, is_admin: bool = False
    ) -> db_models.StudyGroupMember:
        return self.create(
            {"group_id": group_id, "user_id": user_id, "is_admin": is_admin}
        )

    def get_members(self, group_id: int) -> List[db_models.StudyGroupMember]:
        return self.filter_by({"group_id": group_id})

    def get_membership(
        self, group_id: int, user_id: int
    ) -> Optional[db_models.StudyGroupMember]:
        matches = self.filter_by({"group_id": group_id, "user_id": user_id})
        return matches[0] if matches else None

    def is_member(self, group_id: int, user_id: int) -> bool:
        return self.get_membership(group_id, user_id) is not None

    def remove(self, group_id: int, user_id: int) -> bool:
        """
        Remove a user from a group.

        Returns:
            True if a membership row was removed
        """
        with self.store.lock:
            membership = self.get_membership(group_id, user_id)
            if membership is None:
                return False
            return self.delete(membership.id)

    def group_ids_for_user(self, user_id: int) -> Set[int]:
        return {m.group_id for m in self.filter_by({"user_id": user_id})}


class StudySessionRepository(BaseRepository[db_models.StudySession]):
    """Repository for scheduled study sessions."""

    def __init__(self, store: MemStorage):
        super().__init__(store, store.study_sessions)

    def get_for_group(self, group_id: int) -> List[db_models.StudySession]:
        """Sessions of one group, soonest first."""
        sessions = self.filter_by({"group_id": group_id})
        return sorted(sessions, key=lambda s: s.start_time)

    def get_for_groups(self, group_ids: Set[int]) -> List[db_models.StudySession]:
        return [s for s in self.table.values() if s.group_id in group_ids]

    def get_upcoming_for_groups(
        self, group_ids: Set[int]
    ) -> List[db_models.StudySession]:
        """Sessions of the given groups starting after now, soonest first."""
        now = utc_now()
        upcoming = [s for s in self.get_for_groups(group_ids) if s.start_time > now]
        return sorted(upcoming, key=lambda s: s.start_time)

    def search(
        self, query: str, limit: Optional[int] = None
    ) -> List[db_models.StudySession]:
        """
        Search sessions that have not ended yet.

        Title matches first, then soonest start.
        """
        now = utc_now()
        not_ended = [s for s in self.table.values() if s.end_time >= now]
        return self._search(
            query,
            fields=("title", "description", "location"),
            primary="title",
            tie_break=lambda sessions: sorted(sessions, key=lambda s: s.start_time),
            records=not_ended,
            limit=limit,
        )
