"""
Upload service.

Handles the business logic behind POST /upload.

Flow:
1. Generate a fresh file_id (uuid4)
2. Derive the object key {folder}/{file_id}-{filename}
3. PUT the bytes to S3 (private)
4. Permanent mode: try to make the object public-read, build the public URL
5. Otherwise: presign a GET URL valid for 24 hours
"""
import uuid
import logging
from dataclasses import dataclass
from typing import Optional

from relay.config import Settings
from relay.services.access_urls import AccessUrlService
from relay.storage.keys import build_object_key
from relay.storage.s3_client import AclResult, S3Client

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class UploadResult:
    """Outcome of a successful upload."""
    file_id: str
    object_key: str
    file_url: str
    is_permanent: bool
    size_bytes: int
    acl_result: Optional[AclResult] = None  # Only set in permanent mode


class UploadService:
    """Stores one uploaded file and returns its access URL."""

    def __init__(self, storage: S3Client, settings: Settings, access_urls: AccessUrlService):
        self._storage = storage
        self._settings = settings
        self._access_urls = access_urls

    @staticmethod
    def generate_file_id() -> str:
        return str(uuid.uuid4())

    def upload(self, filename: str, content: bytes, content_type: Optional[str]) -> UploadResult:
        """
        Upload content to the bucket and build its access URL.

        Blocking (boto3); call it from a worker thread in async code.

        Args:
            filename: Original filename as supplied by the client
            content: Full file content (already buffered in memory)
            content_type: Declared MIME type, may be empty

        Returns:
            UploadResult with the generated file_id and URL

        Raises:
            StorageError: If the upload or URL generation fails
        """
        file_id = self.generate_file_id()
        object_key = build_object_key(self._settings.s3_folder, file_id, filename)

        self._storage.put_object(
            object_key,
            content,
            content_type or DEFAULT_CONTENT_TYPE
        )

        acl_result = None
        if self._access_urls.is_permanent:
            acl_result = self._storage.make_public(object_key)

        file_url = self._access_urls.url_for(object_key)

        logger.debug(f"Stored upload {file_id} as {object_key}")

        return UploadResult(
            file_id=file_id,
            object_key=object_key,
            file_url=file_url,
            is_permanent=self._access_urls.is_permanent,
            size_bytes=len(content),
            acl_result=acl_result,
        )
