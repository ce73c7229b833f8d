"""
Health check endpoint.
Verifies the bucket is reachable.
"""
import asyncio
import logging
from fastapi import APIRouter, Depends, HTTPException

from relay.api.dependencies import get_settings, get_storage
from relay.config import Settings
from relay.storage.s3_client import S3Client, StorageError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check(
    storage: S3Client = Depends(get_storage),
    settings: Settings = Depends(get_settings)
):
    """
    Health check endpoint.
    Returns status of the storage bucket.
    """
    health_status = {
        "status": "healthy",
        "storage": "unknown",
        "bucket": storage.bucket,
        "environment": settings.environment
    }

    try:
        await asyncio.to_thread(storage.check_bucket)
        health_status["storage"] = "connected"
    except StorageError as e:
        logger.warning(f"Health check failed: {e}")
        health_status["storage"] = "unreachable"
        health_status["status"] = "unhealthy"

    if health_status["status"] == "unhealthy":
        raise HTTPException(status_code=503, detail=health_status)

    return health_status
