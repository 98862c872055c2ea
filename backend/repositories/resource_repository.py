"""
Study resource repository for store operations.
"""

from typing import Optional

import repositories.db_models as db_models
from repositories.memory_store import MemStorage

from .base import BaseRepository


class ResourceRepository(BaseRepository[db_models.Resource]):
    """Repository for shared study resources (notes, slides, cheat sheets)."""

    def __init__(self, store: MemStorage):
        super().__init__(store, store.resources)

    def increment_downloads(self, resource_id: int) -> Optional[db_models.Resource]:
        """Add one to the download counter; None if the resource is missing."""
        with self.store.lock:
            if self.get_by_id(resource_id) is None:
                return None
            return self.table.apply(
                resource_id, lambda resource: {"downloads": resource.downloads + 1}
            )

    def rate(self, resource_id: int, rating: int) -> db_models.Resource:
        """
        Set the resource rating.

        Raises:
            RecordNotFoundException: If the resource does not exist
        """
        return self.update(resource_id, {"rating": rating})
