"""
Resource Service

Shared study resources: notes, slides, cheat sheets.
"""

from typing import List, Optional

from fastapi import UploadFile
from loguru import logger

import models.schemas as schemas
import repositories.db_models as db_models
from helpers.sanitization import sanitize_html, sanitize_plain_text
from helpers.uploads import save_upload
from models.exceptions import ResourceNotFoundException
from repositories.memory_store import MemStorage
from repositories.resource_repository import ResourceRepository
from services.activity_service import ActivityService


class ResourceService:
    """Service for study resources."""

    @staticmethod
    def upload_resource(
        store: MemStorage,
        resource_data: schemas.ResourceCreate,
        file: Optional[UploadFile],
        uploader_id: int,
    ) -> db_models.Resource:
        file_url = save_upload(file, "resources")

        with store.atomic(store.resources, store.activities):
            resource = ResourceRepository(store).create(
                {
                    "title": sanitize_plain_text(resource_data.title),
                    "description": sanitize_html(resource_data.description),
                    "type": sanitize_plain_text(resource_data.type),
                    "course": sanitize_plain_text(resource_data.course),
                    "file_url": file_url,
                    "uploader_id": uploader_id,
                }
            )
            ActivityService.record(
                store,
                user_id=uploader_id,
                activity_type=db_models.ActivityType.RESOURCE_UPLOAD,
                target_id=resource.id,
                target_type="resource",
                metadata={"title": resource.title, "type": resource.type},
            )

        logger.info(f"Resource {resource.id} uploaded by user {uploader_id}")
        return resource

    @staticmethod
    def get_resources(
        store: MemStorage,
        resource_type: Optional[str] = None,
        course: Optional[str] = None,
    ) -> List[db_models.Resource]:
        filters = {}
        if resource_type:
            filters["type"] = resource_type
        if course:
            filters["course"] = course
        return ResourceRepository(store).filter_by(filters or None)

    @staticmethod
    def get_resource(store: MemStorage, resource_id: int) -> db_models.Resource:
        resource = ResourceRepository(store).get_by_id(resource_id)
        if resource is None:
            raise ResourceNotFoundException(resource_id)
        return resource

    @staticmethod
    def download_resource(store: MemStorage, resource_id: int) -> db_models.Resource:
        resource = ResourceRepository(store).increment_downloads(resource_id)
        if resource is None:
            raise ResourceNotFoundException(resource_id)
        return resource

    @staticmethod
    def rate_resource(
        store: MemStorage, resource_id: int, rating: int
    ) -> db_models.Resource:
        """
        Set a resource's rating (1 to 5).

        Raises:
            ResourceNotFoundException: If the resource does not exist
        """
        repo = ResourceRepository(store)
        with store.lock:
            if repo.get_by_id(resource_id) is None:
                raise ResourceNotFoundException(resource_id)
            return repo.rate(resource_id, rating)
