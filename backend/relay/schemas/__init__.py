"""
Pydantic schemas for API request/response validation.
"""
from relay.schemas.files import (
    UploadResponse,
    ShareResponse,
    ErrorResponse,
)

__all__ = [
    "UploadResponse",
    "ShareResponse",
    "ErrorResponse",
]
