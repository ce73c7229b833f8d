"""
Upload endpoint.

POST /upload takes a multipart form with one file field ("file"), stores
the bytes in S3 under {folder}/{fileId}-{filename} and returns an access
URL: permanent (public-read) or signed for 24 hours, depending on
USE_PERMANENT_URLS.

The file is buffered in memory before it is sent to S3. At most
MAX_UPLOAD_SIZE + 1 bytes are read, so larger bodies are rejected without
being loaded.
"""
import asyncio
import logging
import time
from fastapi import APIRouter, Depends, HTTPException, Request, status
from starlette.datastructures import UploadFile

from relay.api.dependencies import get_settings, get_upload_service
from relay.config import Settings
from relay.schemas.files import ErrorResponse, UploadResponse
from relay.services.upload_service import UploadService
from relay.storage.s3_client import AclResult, StorageError
from relay.utils.logging import log_acl_unsupported, log_file_uploaded, log_storage_failure
from relay.utils.metrics import (
    acl_results_total,
    files_uploaded_total,
    storage_errors_total,
    upload_size_bytes,
)

logger = logging.getLogger(__name__)

router = APIRouter()

FILE_FIELD = "file"


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={
        400: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def upload_file(
    request: Request,
    service: UploadService = Depends(get_upload_service),
    settings: Settings = Depends(get_settings)
):
    """
    Upload a single file to the bucket.

    Flow:
    1. Reject requests without a file part (400). A text value in the
       file field counts as no file.
    2. Read up to MAX_UPLOAD_SIZE bytes (413 beyond that)
    3. Store it under a fresh file id
    4. Return the access URL and file id

    Storage errors are logged and answered with a generic 500.
    """
    async with request.form() as form:
        file = form.get(FILE_FIELD)
        if not isinstance(file, UploadFile) or not file.filename:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No file uploaded"
            )

        filename = file.filename
        content_type = file.content_type
        content = await file.read(settings.max_upload_size + 1)

    if len(content) > settings.max_upload_size:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="File too large"
        )

    start_time = time.time()
    try:
        result = await asyncio.to_thread(
            service.upload,
            filename,
            content,
            content_type
        )
    except StorageError as e:
        storage_errors_total.labels(operation=e.operation).inc()
        log_storage_failure(
            logger,
            operation=e.operation,
            error=str(e.cause),
            duration_ms=(time.time() - start_time) * 1000,
            original_filename=filename
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to upload file"
        )
    except Exception as e:
        logger.error(
            f"Error uploading file: {str(e)}",
            extra={"event": "upload_failed", "error": str(e)},
            exc_info=True
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to upload file"
        )

    if result.acl_result is not None:
        acl_results_total.labels(result=result.acl_result.value).inc()
        if result.acl_result == AclResult.UNSUPPORTED:
            log_acl_unsupported(logger, file_id=result.file_id, object_key=result.object_key)

    files_uploaded_total.labels(url_type="permanent" if result.is_permanent else "signed").inc()
    upload_size_bytes.observe(result.size_bytes)

    log_file_uploaded(
        logger,
        file_id=result.file_id,
        object_key=result.object_key,
        size_bytes=result.size_bytes,
        is_permanent=result.is_permanent,
        duration_ms=(time.time() - start_time) * 1000
    )

    return UploadResponse(
        message="File uploaded successfully",
        file_url=result.file_url,
        file_id=result.file_id,
        is_permanent=result.is_permanent
    )
