"""
Paper Service

Past-paper uploads, listing and downloads.
"""

from typing import Any, List, Optional

from fastapi import UploadFile
from loguru import logger

import models.schemas as schemas
import repositories.db_models as db_models
from helpers.sanitization import sanitize_html, sanitize_plain_text
from helpers.uploads import save_upload
from helpers.user_display import ANONYMOUS_UPLOADER
from models.exceptions import PaperNotFoundException
from repositories.memory_store import MemStorage
from repositories.paper_repository import PaperRepository
from repositories.user_repository import UserRepository
from services.activity_service import ActivityService


class PaperService:
    """Service for past papers."""

    @staticmethod
    def _with_uploader(
        store: MemStorage, papers: List[db_models.Paper]
    ) -> List[dict[str, Any]]:
        user_repo = UserRepository(store)
        views = []
        for paper in papers:
            uploader = user_repo.get_by_id(paper.uploader_id)
            name = uploader.username if uploader else ANONYMOUS_UPLOADER
            views.append({**paper.model_dump(), "uploader_name": name})
        return views

    @staticmethod
    def upload_paper(
        store: MemStorage,
        paper_data: schemas.PaperCreate,
        file: Optional[UploadFile],
        uploader_id: int,
    ) -> db_models.Paper:
        """
        Store an uploaded paper and record the activity.

        Raises:
            InvalidUploadException: If the file is missing or rejected
        """
        file_url = save_upload(file, "papers")

        with store.atomic(store.papers, store.activities):
            paper = PaperRepository(store).create(
                {
                    "title": sanitize_plain_text(paper_data.title),
                    "description": sanitize_html(paper_data.description),
                    "course": sanitize_plain_text(paper_data.course),
                    "year": paper_data.year,
                    "institution": sanitize_plain_text(paper_data.institution),
                    "file_url": file_url,
                    "uploader_id": uploader_id,
                }
            )
            ActivityService.record(
                store,
                user_id=uploader_id,
                activity_type=db_models.ActivityType.PAPER_UPLOAD,
                target_id=paper.id,
                target_type="paper",
                metadata={"title": paper.title, "course": paper.course},
            )

        logger.info(f"Paper {paper.id} uploaded by user {uploader_id}")
        return paper

    @staticmethod
    def get_papers(
        store: MemStorage,
        course: Optional[str] = None,
        year: Optional[str] = None,
        institution: Optional[str] = None,
    ) -> List[dict[str, Any]]:
        """Papers matching every given filter, annotated with the uploader."""
        filters = {
            key: value
            for key, value in (
                ("course", course),
                ("year", year),
                ("institution", institution),
            )
            if value
        }
        papers = PaperRepository(store).filter_by(filters or None)
        return PaperService._with_uploader(store, papers)

    @staticmethod
    def get_user_papers(store: MemStorage, user_id: int) -> List[dict[str, Any]]:
        papers = PaperRepository(store).get_by_uploader(user_id)
        return PaperService._with_uploader(store, papers)

    @staticmethod
    def get_paper(store: MemStorage, paper_id: int) -> dict[str, Any]:
        """
        Raises:
            PaperNotFoundException: If the paper does not exist
        """
        paper = PaperRepository(store).get_by_id(paper_id)
        if paper is None:
            raise PaperNotFoundException(paper_id)
        return PaperService._with_uploader(store, [paper])[0]

    @staticmethod
    def download_paper(store: MemStorage, paper_id: int) -> db_models.Paper:
        """
        Count a download.

        Raises:
            PaperNotFoundException: If the paper does not exist
        """
        paper = PaperRepository(store).increment_downloads(paper_id)
        if paper is None:
            raise PaperNotFoundException(paper_id)
        return paper
