"""
File upload handling for papers and study resources.

Files are written under ``settings.UPLOAD_DIR`` with a random name; the store
only keeps the public URL.
"""

import uuid
from pathlib import Path
from typing import Optional

from fastapi import UploadFile
from loguru import logger

from models.config import settings
from models.exceptions import InvalidUploadException

UPLOAD_URL_PREFIX = "/uploads"


def validate_upload(filename: Optional[str], size: int) -> str:
    """
    Check an upload's name and size.

    Args:
        filename: Client-supplied filename
        size: Size of the content in bytes

    Returns:
        The lower-cased file extension, including the dot

    Raises:
        InvalidUploadException: If the file is missing, empty, too large or
            has a disallowed extension
    """
    if not filename:
        raise InvalidUploadException("No file uploaded")

    extension = Path(filename).suffix.lower()
    allowed = [ext.lower() for ext in settings.ALLOWED_UPLOAD_EXTENSIONS]
    if extension not in allowed:
        raise InvalidUploadException(
            f"Invalid file type '{extension or filename}'. "
            f"Allowed: {', '.join(allowed)}"
        )

    if size == 0:
        raise InvalidUploadException("Uploaded file is empty")
    if size > settings.max_upload_size_bytes:
        raise InvalidUploadException(
            f"File size exceeds {settings.MAX_UPLOAD_SIZE_MB}MB limit"
        )

    return extension


def save_upload(file: Optional[UploadFile], subdir: str) -> str:
    """
    Validate and write an uploaded file.

    Args:
        file: The uploaded file (None when the form had no file part)
        subdir: Directory under the upload root, e.g. "papers"

    Returns:
        Public URL of the stored file

    Raises:
        InvalidUploadException: If the file fails validation
    """
    if file is None:
        raise InvalidUploadException("No file uploaded")

    # Read one byte past the limit so oversize files are detected without
    # buffering arbitrarily large bodies
    content = file.file.read(settings.max_upload_size_bytes + 1)
    extension = validate_upload(file.filename, len(content))

    # Unpredictable filename; the client name is never used on disk
    filename = f"{uuid.uuid4().hex}{extension}"
    target_dir = Path(settings.UPLOAD_DIR) / subdir
    target_dir.mkdir(parents=True, exist_ok=True)
    (target_dir / filename).write_bytes(content)

    logger.info(f"Stored upload {subdir}/{filename} ({len(content)} bytes)")
    return f"{UPLOAD_URL_PREFIX}/{subdir}/{filename}"
