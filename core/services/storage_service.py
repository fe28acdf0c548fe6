# =============================================================================
# core/services/storage_service.py - Supabase Storage Operations
# =============================================================================
# Handles binary uploads to the resources bucket and public URL lookups.
# =============================================================================

import asyncio
import logging
import mimetypes

from app.exceptions import StorageUploadError
from core.models.upload import SelectedFile
from lib.supabase_client import SupabaseClientError
from lib.utils import storage_object_name

from .base import BackendService

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def content_type_for(file: SelectedFile) -> str:
    """The picker's MIME type, else a guess from the name, else octet-stream."""
    if file.mime_type:
        return file.mime_type
    guessed, _ = mimetypes.guess_type(file.name)
    return guessed or DEFAULT_CONTENT_TYPE


class StorageService(BackendService):
    """
    Service for Supabase Storage operations.

    Objects are stored flat in the bucket under generated names; the
    bucket itself is named in settings.STORAGE_BUCKET.
    """

    async def read_file(self, file: SelectedFile) -> bytes:
        """
        Bytes of a selected file.

        Raises:
            StorageUploadError: If the file cannot be read
        """
        if file.content is not None:
            return file.content
        if file.path is None:
            raise StorageUploadError(file.name, "No file content or path was provided")
        try:
            return await asyncio.to_thread(file.path.read_bytes)
        except OSError as e:
            raise StorageUploadError(str(file.path), f"Could not read file: {e}")

    async def upload_file(self, file: SelectedFile) -> tuple[str, int]:
        """
        Upload a selected file under a collision-resistant name.

        Returns:
            (storage path, size in bytes)

        Raises:
            StorageUploadError: If reading or uploading fails
        """
        data = await self.read_file(file)
        name = storage_object_name(file.name)
        content_type = content_type_for(file)

        logger.info(f"Uploading file {name} ({len(data)} bytes, {content_type})")
        try:
            path = await self.backend.upload_object(name, data, content_type)
        except SupabaseClientError as e:
            logger.error(f"Storage upload failed: {e}")
            raise StorageUploadError(name, e.message, status=e.status)

        logger.info(f"Uploaded file to storage: {path}")
        return path, len(data)

    async def get_public_url(self, storage_path: str) -> str:
        """
        Get a public URL for a storage file.

        Raises:
            SupabaseClientError: If the URL cannot be resolved
        """
        return await self.backend.get_public_url(storage_path)
