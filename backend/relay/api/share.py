"""
Share endpoint.
GET /share/{file_id} finds the stored object by key prefix and returns a
fresh signed URL, or the permanent URL in permanent mode.
"""
import asyncio
import logging
import time
from fastapi import APIRouter, Depends, HTTPException, status

from relay.api.dependencies import get_share_service
from relay.schemas.files import ErrorResponse, ShareResponse
from relay.services.share_service import ShareService
from relay.storage.s3_client import StorageError
from relay.utils.logging import log_share_not_found, log_share_resolved, log_storage_failure
from relay.utils.metrics import share_links_resolved_total, storage_errors_total

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/share/{file_id}",
    response_model=ShareResponse,
    responses={
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def get_share_link(
    file_id: str,
    service: ShareService = Depends(get_share_service)
):
    """
    Resolve a file id to an access URL.
    The file id is opaque; no format validation is done.
    """
    start_time = time.time()
    try:
        link = await asyncio.to_thread(service.resolve, file_id)
    except StorageError as e:
        share_links_resolved_total.labels(result="error").inc()
        storage_errors_total.labels(operation=e.operation).inc()
        log_storage_failure(
            logger,
            operation=e.operation,
            error=str(e.cause),
            file_id=file_id,
            duration_ms=(time.time() - start_time) * 1000
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate share link"
        )
    except Exception as e:
        share_links_resolved_total.labels(result="error").inc()
        logger.error(
            f"Error generating share link: {str(e)}",
            extra={"event": "share_failed", "file_id": file_id, "error": str(e)},
            exc_info=True
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate share link"
        )

    duration_ms = (time.time() - start_time) * 1000

    if link is None:
        share_links_resolved_total.labels(result="not_found").inc()
        log_share_not_found(logger, file_id=file_id, duration_ms=duration_ms)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="File not found"
        )

    share_links_resolved_total.labels(result="found").inc()
    log_share_resolved(
        logger,
        file_id=file_id,
        object_key=link.object_key,
        is_permanent=link.is_permanent,
        duration_ms=duration_ms
    )

    return ShareResponse(
        file_url=link.file_url,
        is_permanent=link.is_permanent
    )
