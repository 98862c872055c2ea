"""
Paper repository for store operations.
"""

from typing import List, Optional

import repositories.db_models as db_models
from models.exceptions import PaperNotFoundException
from repositories.memory_store import MemStorage

from .base import BaseRepository, newest_first

SEARCH_FIELDS = ("title", "course", "institution", "description")


class PaperRepository(BaseRepository[db_models.Paper]):
    """Repository for past papers."""

    def __init__(self, store: MemStorage):
        super().__init__(store, store.papers)

    def get_by_uploader(self, uploader_id: int) -> List[db_models.Paper]:
        """Papers uploaded by one user, newest first."""
        return newest_first("upload_date")(self.filter_by({"uploader_id": uploader_id}))

    def increment_downloads(self, paper_id: int) -> Optional[db_models.Paper]:
        """
        Add one to the download counter.

        Returns:
            The updated paper, or None if it does not exist
        """
        with self.store.lock:
            if self.get_by_id(paper_id) is None:
                return None
            return self.table.apply(
                paper_id, lambda paper: {"downloads": paper.downloads + 1}
            )

    def delete(self, id: int) -> bool:
        """
        Delete a paper.

        Raises:
            PaperNotFoundException: If the paper does not exist
        """
        if not super().delete(id):
            raise PaperNotFoundException(id)
        return True

    def search(self, query: str, limit: Optional[int] = None) -> List[db_models.Paper]:
        """
        Search papers.

        Title matches first, then most recently uploaded.
        """
        return self._search(
            query,
            fields=SEARCH_FIELDS,
            primary="title",
            tie_break=newest_first("upload_date"),
            limit=limit,
        )
