"""
Production logging utility for structured JSON logging.

Provides event-specific logging functions with mandatory fields:
- timestamp (ISO8601)
- level
- service
- event

Optional fields (included when applicable):
- file_id
- object_key
- duration_ms

Usage:
    from relay.utils.logging import configure_logging, log_file_uploaded

    configure_logging('file-relay', 'INFO')
    log_file_uploaded(logger, file_id='123', object_key='uploads/123-a.txt', ...)
"""
import logging
import sys
from typing import Optional, Dict, Any
from pythonjsonlogger import jsonlogger


# Attributes every LogRecord already has; logging refuses them in extra=
RESERVED_RECORD_FIELDS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__
) | {"message", "asctime"}


class ServiceFilter(logging.Filter):
    """Stamp the service name on every record."""

    def __init__(self, service_name: str):
        super().__init__()
        self.service_name = service_name

    def filter(self, record):
        record.service = self.service_name
        return True


def build_formatter() -> jsonlogger.JsonFormatter:
    """JSON formatter emitting timestamp, level, logger name and message."""
    return jsonlogger.JsonFormatter(
        '%(timestamp)s %(levelname)s %(name)s %(message)s',
        rename_fields={"levelname": "level"},
        timestamp=True,
        json_ensure_ascii=False
    )


class StructuredLogger:
    """Configures the root logger for JSON output, once per process."""

    _configured = False

    @classmethod
    def configure(cls, service_name: str, log_level: str = "INFO"):
        """
        Send JSON logs to stdout, tagged with service_name.

        Args:
            service_name: Service identifier (file-relay)
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        """
        if cls._configured:
            return

        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(build_formatter())
        handler.addFilter(ServiceFilter(service_name))

        root_logger = logging.getLogger()
        root_logger.handlers = [handler]
        root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
        cls._configured = True


def _build_log_extra(
    event: str,
    file_id: Optional[str] = None,
    object_key: Optional[str] = None,
    duration_ms: Optional[float] = None,
    **kwargs
) -> Dict[str, Any]:
    """
    Build extra fields for structured logging.

    Keys that clash with LogRecord attributes (filename, module, ...) are
    stored with an "extra_" prefix instead of overwriting the record.

    Args:
        event: Event name (mandatory)
        file_id: Optional file ID
        object_key: Optional S3 object key
        duration_ms: Optional duration in milliseconds
        **kwargs: Additional fields

    Returns:
        Dictionary of extra fields
    """
    extra = {"event": event}
    for key, value in kwargs.items():
        if key in RESERVED_RECORD_FIELDS:
            key = f"extra_{key}"
        extra[key] = value

    if file_id:
        extra["file_id"] = file_id
    if object_key:
        extra["object_key"] = object_key
    if duration_ms is not None:
        extra["duration_ms"] = round(duration_ms, 2)

    return extra


# Upload event functions

def log_file_uploaded(
    logger: logging.Logger,
    file_id: str,
    object_key: str,
    size_bytes: int,
    is_permanent: bool,
    duration_ms: Optional[float] = None,
    **kwargs
):
    """
    Log a completed upload.

    Args:
        logger: Logger instance
        file_id: Generated file ID (required)
        object_key: Storage key written (required)
        size_bytes: Uploaded size in bytes
        is_permanent: Whether a permanent URL was returned
        duration_ms: Optional duration in milliseconds
        **kwargs: Additional fields
    """
    extra = _build_log_extra(
        event="file_uploaded",
        file_id=file_id,
        object_key=object_key,
        duration_ms=duration_ms,
        size_bytes=size_bytes,
        is_permanent=is_permanent,
        **kwargs
    )

    logger.info(f"File uploaded: {file_id}", extra=extra)


def log_acl_unsupported(
    logger: logging.Logger,
    file_id: str,
    object_key: str,
    **kwargs
):
    """
    Log that the bucket refused a public-read ACL.
    Expected for buckets with ACLs disabled, so logged at INFO.
    """
    extra = _build_log_extra(
        event="acl_unsupported",
        file_id=file_id,
        object_key=object_key,
        **kwargs
    )

    logger.info(
        "ACLs not supported on this bucket, using bucket policy for public access",
        extra=extra
    )


# Share event functions

def log_share_resolved(
    logger: logging.Logger,
    file_id: str,
    object_key: str,
    is_permanent: bool,
    duration_ms: Optional[float] = None,
    **kwargs
):
    """Log a share link resolved to an object."""
    extra = _build_log_extra(
        event="share_resolved",
        file_id=file_id,
        object_key=object_key,
        duration_ms=duration_ms,
        is_permanent=is_permanent,
        **kwargs
    )

    logger.info(f"Share link resolved: {file_id}", extra=extra)


def log_share_not_found(
    logger: logging.Logger,
    file_id: str,
    duration_ms: Optional[float] = None,
    **kwargs
):
    """Log a share lookup that matched no object."""
    extra = _build_log_extra(
        event="share_not_found",
        file_id=file_id,
        duration_ms=duration_ms,
        **kwargs
    )

    logger.info(f"Share link not found: {file_id}", extra=extra)


# Storage event functions

def log_storage_failure(
    logger: logging.Logger,
    operation: str,
    error: str,
    file_id: Optional[str] = None,
    duration_ms: Optional[float] = None,
    include_traceback: bool = True,
    **kwargs
):
    """
    Log a failed storage operation.

    The error stays in the server logs; clients only see a generic message.

    Args:
        logger: Logger instance
        operation: S3 operation name (put_object, list_objects_v2, ...) (required)
        error: Error message (required)
        file_id: Optional file ID
        duration_ms: Optional duration in milliseconds
        include_traceback: Whether to include stack trace (default: True)
        **kwargs: Additional fields
    """
    extra = _build_log_extra(
        event="storage_failure",
        file_id=file_id,
        duration_ms=duration_ms,
        operation=operation,
        error=str(error),
        **kwargs
    )

    message = f"Storage failure: {operation} - {error}"

    if include_traceback:
        exc_info = sys.exc_info()
        if exc_info[0] is not None:
            logger.error(message, extra=extra, exc_info=exc_info)
        else:
            logger.error(message, extra=extra)
    else:
        logger.error(message, extra=extra)


# Convenience alias
def configure_logging(service_name: str, log_level: str = "INFO"):
    """Configure logging (alias for StructuredLogger.configure)."""
    StructuredLogger.configure(service_name, log_level)
