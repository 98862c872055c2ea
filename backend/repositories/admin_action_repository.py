"""
Admin action audit log repository.
"""

from typing import List, Optional

import repositories.db_models as db_models
from repositories.memory_store import MemStorage

from .base import BaseRepository, newest_first


class AdminActionRepository(BaseRepository[db_models.AdminAction]):
    """Append-only audit trail of admin operations."""

    def __init__(self, store: MemStorage):
        super().__init__(store, store.admin_actions)

    def record(
        self,
        admin_id: int,
        action: db_models.AdminActionType,
        target_type: db_models.AdminTargetType,
        target_id: int,
        reason: Optional[str] = None,
    ) -> db_models.AdminAction:
        return self.create(
            {
                "admin_id": admin_id,
                "action": action,
                "target_type": target_type,
                "target_id": target_id,
                "reason": reason,
            }
        )

    def get_all(
        self, skip: int = 0, limit: Optional[int] = None
    ) -> List[db_models.AdminAction]:
        """Audit entries, newest first."""
        actions = newest_first("created_at")(self.table.values())[skip:]
        return actions if limit is None else actions[:limit]
