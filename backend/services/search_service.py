"""
Search Service

Per-entity search and the combined search used by the global search bar.
Ranking lives in the repositories: title (or name) matches come first, then
an entity-specific order.
"""

from typing import List, Optional

import models.schemas as schemas
import repositories.db_models as db_models
from models.config import settings
from models.exceptions import ValidationException
from repositories.discussion_repository import DiscussionPostRepository
from repositories.memory_store import MemStorage
from repositories.paper_repository import PaperRepository
from repositories.study_group_repository import (
    StudyGroupRepository,
    StudySessionRepository,
)


class SearchService:
    """Service for free-text search."""

    @staticmethod
    def search_papers(
        store: MemStorage, query: str, limit: Optional[int] = None
    ) -> List[db_models.Paper]:
        return PaperRepository(store).search(query, limit)

    @staticmethod
    def search_discussions(
        store: MemStorage, query: str, limit: Optional[int] = None
    ) -> List[db_models.DiscussionPost]:
        return DiscussionPostRepository(store).search(query, limit)

    @staticmethod
    def search_groups(
        store: MemStorage, query: str, limit: Optional[int] = None
    ) -> List[db_models.StudyGroup]:
        return StudyGroupRepository(store).search(query, limit)

    @staticmethod
    def search_sessions(
        store: MemStorage, query: str, limit: Optional[int] = None
    ) -> List[db_models.StudySession]:
        return StudySessionRepository(store).search(query, limit)

    @staticmethod
    def search_all(
        store: MemStorage, query: str, limit: Optional[int] = None
    ) -> List[schemas.SearchResult]:
        """
        Search papers, discussions, groups and sessions at once.

        Results are grouped by kind in that order and truncated to ``limit``.

        Raises:
            ValidationException: If the query is empty
        """
        if not query or not query.strip():
            raise ValidationException("Search query is required")
        limit = limit or settings.SEARCH_DEFAULT_LIMIT

        results = [
            schemas.SearchResult(
                id=p.id, title=p.title, type="paper", url=f"/papers?id={p.id}"
            )
            for p in SearchService.search_papers(store, query, limit)
        ]
        results += [
            schemas.SearchResult(
                id=d.id,
                title=d.title,
                type="discussion",
                url=f"/discussions?id={d.id}",
            )
            for d in SearchService.search_discussions(store, query, limit)
        ]
        results += [
            schemas.SearchResult(
                id=g.id, title=g.name, type="group", url=f"/groups/{g.id}"
            )
            for g in SearchService.search_groups(store, query, limit)
        ]
        results += [
            schemas.SearchResult(
                id=s.id, title=s.title, type="session", url=f"/sessions?id={s.id}"
            )
            for s in SearchService.search_sessions(store, query, limit)
        ]
        return results[:limit]
