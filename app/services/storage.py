from fastapi import UploadFile
import os
import uuid
import logging

from app import config

logger = logging.getLogger(__name__)


def upload_image(supabase, file: UploadFile) -> str:
    """Upload an image to the storage bucket and return its public view URL."""
    bucket = config.storage_bucket()
    extension = os.path.splitext(file.filename or "")[1].lower()
    path = f"{uuid.uuid4()}{extension}"

    contents = file.file.read()
    logger.info(f"Uploading {len(contents)} bytes to {bucket}/{path}")

    supabase.storage.from_(bucket).upload(
        path,
        contents,
        {"content-type": file.content_type or "application/octet-stream"},
    )
    url = supabase.storage.from_(bucket).get_public_url(path)
    logger.info(f"Uploaded image available at {url}")
    return url


def resolve_image_url(supabase, file, current_url: str) -> str:
    # No new file: the existing URL is kept as-is
    if file is None or not getattr(file, "filename", None):
        return current_url
    return upload_image(supabase, file)
