"""
Share service.
Resolves a file_id issued at upload time back to an access URL.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from relay.config import Settings
from relay.services.access_urls import AccessUrlService
from relay.storage.keys import build_key_prefix
from relay.storage.s3_client import S3Client

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShareLink:
    """Access URL for a stored object."""
    file_id: str
    object_key: str
    file_url: str
    is_permanent: bool


class ShareService:
    """Finds the object stored for a file_id by key prefix. Read-only."""

    def __init__(self, storage: S3Client, settings: Settings, access_urls: AccessUrlService):
        self._storage = storage
        self._settings = settings
        self._access_urls = access_urls

    def resolve(self, file_id: str) -> Optional[ShareLink]:
        """
        Look up the object for file_id and build a URL for it.

        file_id is opaque and not validated. If several objects share the
        prefix, the first one S3 lists is used.

        Returns:
            ShareLink, or None if no object matches

        Raises:
            StorageError: If listing or URL generation fails
        """
        prefix = build_key_prefix(self._settings.s3_folder, file_id)
        object_key = self._storage.find_first_key(prefix)

        if object_key is None:
            return None

        logger.debug(f"Resolved {file_id} to {object_key}")

        return ShareLink(
            file_id=file_id,
            object_key=object_key,
            file_url=self._access_urls.url_for(object_key),
            is_permanent=self._access_urls.is_permanent,
        )
