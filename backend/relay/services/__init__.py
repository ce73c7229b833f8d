"""
Services package for business logic.
"""
from relay.services.access_urls import AccessUrlService
from relay.services.upload_service import UploadService, UploadResult
from relay.services.share_service import ShareService, ShareLink

__all__ = [
    "AccessUrlService",
    "UploadService",
    "UploadResult",
    "ShareService",
    "ShareLink",
]
