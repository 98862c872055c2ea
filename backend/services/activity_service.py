"""
Activity Service

Appends entries to the activity feed and reads it back.
"""

from typing import Any, List, Optional

import repositories.db_models as db_models
from repositories.activity_repository import ActivityRepository
from repositories.memory_store import MemStorage


class ActivityService:
    """Service for the activity feed."""

    @staticmethod
    def record(
        store: MemStorage,
        user_id: int,
        activity_type: db_models.ActivityType,
        target_id: int,
        target_type: str,
        metadata: Optional[dict[str, Any]] = None,
    ) -> db_models.Activity:
        """
        Append an activity.

        Args:
            store: Entity store
            user_id: Acting user
            activity_type: What happened
            target_id: ID of the affected record
            target_type: Kind of the affected record, e.g. "paper"
            metadata: Free-form details shown in the feed

        Returns:
            Created activity
        """
        return ActivityRepository(store).create(
            {
                "user_id": user_id,
                "type": activity_type.value,
                "target_id": target_id,
                "target_type": target_type,
                "metadata": metadata or {},
            }
        )

    @staticmethod
    def get_recent(
        store: MemStorage, limit: Optional[int] = None
    ) -> List[db_models.Activity]:
        return ActivityRepository(store).get_recent(limit)

    @staticmethod
    def get_for_user(
        store: MemStorage, user_id: int, limit: Optional[int] = None
    ) -> List[db_models.Activity]:
        return ActivityRepository(store).get_for_user(user_id, limit)
