"""
FastAPI dependencies.
Hand out the settings, storage client and services built once by create_app().
"""
from fastapi import Request

from relay.config import Settings
from relay.services.share_service import ShareService
from relay.services.upload_service import UploadService
from relay.storage.s3_client import S3Client


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_storage(request: Request) -> S3Client:
    return request.app.state.storage


def get_upload_service(request: Request) -> UploadService:
    return request.app.state.upload_service


def get_share_service(request: Request) -> ShareService:
    return request.app.state.share_service
