"""Study resource endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from repositories.database import get_store
from repositories.memory_store import MemStorage
from services.resource_service import ResourceService

router = APIRouter(prefix="/resources", tags=["resources"])


@router.post("", response_model=schemas.Resource, status_code=status.HTTP_201_CREATED)
def upload_resource(
    title: str = Form(..., min_length=1, max_length=200),
    type: str = Form(..., min_length=1),
    course: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    current_user: db_models.User = Depends(auth.get_current_active_user),
    store: MemStorage = Depends(get_store),
) -> db_models.Resource:
    """Upload notes, slides or other study material (multipart form)."""
    resource_data = schemas.ResourceCreate(
        title=title, type=type, course=course, description=description
    )
    return ResourceService.upload_resource(
        store, resource_data, file, current_user.id
    )


@router.get("", response_model=List[schemas.Resource])
def get_resources(
    type: Optional[str] = None,
    course: Optional[str] = None,
    store: MemStorage = Depends(get_store),
) -> List[db_models.Resource]:
    return ResourceService.get_resources(store, resource_type=type, course=course)


@router.get("/{resource_id}", response_model=schemas.Resource)
def get_resource(
    resource_id: int, store: MemStorage = Depends(get_store)
) -> db_models.Resource:
    return ResourceService.get_resource(store, resource_id)


@router.post("/{resource_id}/download", response_model=schemas.Resource)
def download_resource(
    resource_id: int, store: MemStorage = Depends(get_store)
) -> db_models.Resource:
    return ResourceService.download_resource(store, resource_id)


@router.post("/{resource_id}/rate", response_model=schemas.Resource)
def rate_resource(
    resource_id: int,
    rating: schemas.ResourceRating,
    current_user: db_models.User = Depends(auth.get_current_active_user),
    store: MemStorage = Depends(get_store),
) -> db_models.Resource:
    return ResourceService.rate_resource(store, resource_id, rating.rating)
