"""Search endpoints."""

from typing import List

from fastapi import APIRouter, Depends, Query

import models.schemas as schemas
import repositories.db_models as db_models
from helpers.pagination import SearchLimit
from repositories.database import get_store
from repositories.memory_store import MemStorage
from services.search_service import SearchService

router = APIRouter(prefix="/search", tags=["search"])


@router.get("", response_model=List[schemas.SearchResult])
def search_all(
    query: str = Query("", description="Free-text query"),
    limit: SearchLimit = None,
    store: MemStorage = Depends(get_store),
) -> List[schemas.SearchResult]:
    """
    Search papers, discussions, groups and sessions.

    Returns 422 when the query is empty.
    """
    return SearchService.search_all(store, query, limit)


@router.get("/papers", response_model=List[schemas.Paper])
def search_papers(
    q: str = "",
    limit: SearchLimit = None,
    store: MemStorage = Depends(get_store),
) -> List[db_models.Paper]:
    return SearchService.search_papers(store, q, limit)


@router.get("/discussions", response_model=List[schemas.DiscussionPost])
def search_discussions(
    q: str = "",
    limit: SearchLimit = None,
    store: MemStorage = Depends(get_store),
) -> List[db_models.DiscussionPost]:
    return SearchService.search_discussions(store, q, limit)


@router.get("/groups", response_model=List[schemas.StudyGroup])
def search_groups(
    q: str = "",
    limit: SearchLimit = None,
    store: MemStorage = Depends(get_store),
) -> List[db_models.StudyGroup]:
    return SearchService.search_groups(store, q, limit)


@router.get("/sessions", response_model=List[schemas.StudySession])
def search_sessions(
    q: str = "",
    limit: SearchLimit = None,
    store: MemStorage = Depends(get_store),
) -> List[db_models.StudySession]:
    """Sessions that have not ended, title matches first then soonest."""
    return SearchService.search_sessions(store, q, limit)
