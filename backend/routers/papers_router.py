"""Past paper endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from repositories.database import get_store
from repositories.memory_store import MemStorage
from services.paper_service import PaperService

router = APIRouter(prefix="/papers", tags=["papers"])


@router.post("", response_model=schemas.Paper, status_code=status.HTTP_201_CREATED)
def upload_paper(
    title: str = Form(..., min_length=1, max_length=200),
    course: str = Form(..., min_length=1),
    year: str = Form(..., min_length=1),
    institution: str = Form(..., min_length=1),
    description: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    current_user: db_models.User = Depends(auth.get_current_active_user),
    store: MemStorage = Depends(get_store),
) -> db_models.Paper:
    """
    Upload a past paper (multipart form).

    Domain exceptions are caught by centralized exception handlers.
    """
    paper_data = schemas.PaperCreate(
        title=title,
        description=description,
        course=course,
        year=year,
        institution=institution,
    )
    return PaperService.upload_paper(store, paper_data, file, current_user.id)


@router.get("", response_model=List[schemas.PaperWithUploader])
def get_papers(
    course: Optional[str] = None,
    year: Optional[str] = None,
    institution: Optional[str] = None,
    store: MemStorage = Depends(get_store),
):
    """List papers, optionally filtered by exact course, year and institution."""
    return PaperService.get_papers(
        store, course=course, year=year, institution=institution
    )


@router.get("/my-papers", response_model=List[schemas.PaperWithUploader])
def get_my_papers(
    current_user: db_models.User = Depends(auth.get_current_active_user),
    store: MemStorage = Depends(get_store),
):
    return PaperService.get_user_papers(store, current_user.id)


@router.get("/{paper_id}", response_model=schemas.PaperWithUploader)
def get_paper(paper_id: int, store: MemStorage = Depends(get_store)):
    return PaperService.get_paper(store, paper_id)


@router.post("/{paper_id}/download", response_model=schemas.Paper)
def download_paper(
    paper_id: int, store: MemStorage = Depends(get_store)
) -> db_models.Paper:
    """Count a download and return the paper with its file URL."""
    return PaperService.download_paper(store, paper_id)
