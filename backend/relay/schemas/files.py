"""
Pydantic schemas for the upload and share endpoints.

Attributes are snake_case in Python and camelCase on the wire
(fileUrl, fileId, isPermanent).
"""
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UploadResponse(CamelModel):
    """Response schema for POST /upload."""
    message: str = Field(..., description="Human readable status")
    file_url: str = Field(..., description="Permanent or signed URL for the file")
    file_id: str = Field(..., description="Identifier for GET /share/{fileId}")
    is_permanent: bool = Field(..., description="True if file_url never expires")


class ShareResponse(CamelModel):
    """Response schema for GET /share/{fileId}."""
    file_url: str
    is_permanent: bool


class ErrorResponse(BaseModel):
    """Body of every error response."""
    error: str
