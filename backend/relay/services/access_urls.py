"""
Access URL policy.
Decides between a permanent public URL and a time-limited signed URL.
"""
from relay.config import Settings
from relay.storage.s3_client import S3Client


class AccessUrlService:
    """Produces the URL handed back to clients for a stored object."""

    def __init__(self, storage: S3Client, settings: Settings):
        self._storage = storage
        self._settings = settings

    @property
    def is_permanent(self) -> bool:
        return self._settings.use_permanent_urls

    def url_for(self, object_key: str) -> str:
        """
        Build the access URL for object_key.

        Permanent URLs are a pure function of bucket, region and key.
        Signed URLs are fresh on every call and valid for
        signed_url_expiration seconds (24h by default).
        """
        if self.is_permanent:
            return self._storage.public_url(object_key)
        return self._storage.generate_presigned_read_url(
            object_key,
            self._settings.signed_url_expiration
        )
