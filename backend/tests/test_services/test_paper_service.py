"""Tests for PaperService, ResourceService and upload handling."""

import io

import pytest
from fastapi import UploadFile

import models.schemas as schemas
from models.exceptions import InvalidUploadException, PaperNotFoundException
from repositories.activity_repository import ActivityRepository
from repositories.memory_store import MemStorage
from services.paper_service import PaperService
from services.resource_service import ResourceService


def pdf_upload(
    name: str = "final.pdf", content: bytes = b"%PDF-1.4 exam"
) -> UploadFile:
    return UploadFile(file=io.BytesIO(content), filename=name)


def paper_data(**overrides) -> schemas.PaperCreate:
    data = {
        "title": "Calculus I Final",
        "course": "MATH101",
        "year": "2023",
        "institution": "StudySphere University",
    }
    data.update(overrides)
    return schemas.PaperCreate(**data)


class TestPaperService:
    """Test cases for past papers."""

    def test_upload_writes_file_and_activity(
        self, store: MemStorage, test_user, upload_dir
    ):
        paper = PaperService.upload_paper(
            store, paper_data(), pdf_upload(), test_user.id
        )

        assert paper.file_url.startswith("/uploads/papers/")
        assert paper.file_url.endswith(".pdf")
        stored = upload_dir / "papers" / paper.file_url.rsplit("/", 1)[1]
        assert stored.read_bytes() == b"%PDF-1.4 exam"

        activity = ActivityRepository(store).get_for_user(test_user.id)[0]
        assert activity.type == "paper_upload"
        assert activity.metadata == {"title": paper.title, "course": "MATH101"}

    def test_upload_without_file(self, store: MemStorage, test_user, upload_dir):
        with pytest.raises(InvalidUploadException):
            PaperService.upload_paper(store, paper_data(), None, test_user.id)

        assert len(store.papers) == 0

    def test_upload_rejects_extension(self, store: MemStorage, test_user, upload_dir):
        with pytest.raises(InvalidUploadException):
            PaperService.upload_paper(
                store, paper_data(), pdf_upload("run.exe"), test_user.id
            )

    def test_get_papers_filters_and_names_uploader(
        self, store: MemStorage, test_user, upload_dir
    ):
        PaperService.upload_paper(store, paper_data(), pdf_upload(), test_user.id)
        PaperService.upload_paper(
            store, paper_data(course="PHYS101"), pdf_upload(), test_user.id
        )

        papers = PaperService.get_papers(store, course="MATH101")

        assert len(papers) == 1
        assert papers[0]["uploader_name"] == "testuser"

    def test_download_counts(self, store: MemStorage, test_user, upload_dir):
        paper = PaperService.upload_paper(
            store, paper_data(), pdf_upload(), test_user.id
        )

        PaperService.download_paper(store, paper.id)

        assert PaperService.get_paper(store, paper.id)["downloads"] == 1

    def test_download_missing_paper(self, store: MemStorage):
        with pytest.raises(PaperNotFoundException):
            PaperService.download_paper(store, 3)


class TestResourceService:
    """Test cases for study resources."""

    def test_upload_and_rate(self, store: MemStorage, test_user, upload_dir):
        resource = ResourceService.upload_resource(
            store,
            schemas.ResourceCreate(title="Cell Biology Notes", type="notes"),
            pdf_upload("notes.pdf"),
            test_user.id,
        )

        rated = ResourceService.rate_resource(store, resource.id, 5)

        assert resource.file_url.startswith("/uploads/resources/")
        assert rated.rating == 5
        activity = ActivityRepository(store).get_for_user(test_user.id)[0]
        assert activity.type == "resource_upload"
