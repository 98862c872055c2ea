"""
Activity feed repository.
"""

from typing import List, Optional

import repositories.db_models as db_models
from repositories.memory_store import MemStorage

from .base import BaseRepository, newest_first

_newest = newest_first("created_at")


class ActivityRepository(BaseRepository[db_models.Activity]):
    """Append-only feed of user activity."""

    def __init__(self, store: MemStorage):
        super().__init__(store, store.activities)

    def get_for_user(
        self, user_id: int, limit: Optional[int] = None
    ) -> List[db_models.Activity]:
        """Activities of one user, newest first."""
        activities = _newest(self.filter_by({"user_id": user_id}))
        return activities if limit is None else activities[:limit]

    def get_recent(self, limit: Optional[int] = None) -> List[db_models.Activity]:
        """Activities of all users, newest first."""
        activities = _newest(self.table.values())
        return activities if limit is None else activities[:limit]
