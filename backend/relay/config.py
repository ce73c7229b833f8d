"""
Application configuration using Pydantic Settings.
All environment variables are loaded here with sensible defaults.

Settings are frozen: build one instance at startup and hand it to
create_app(), which passes it on to the storage client and services.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # HTTP server
    host: str = "0.0.0.0"
    port: int = 3000

    # Environment
    environment: str = "dev"
    log_level: str = "INFO"

    # AWS credentials (boto3 falls back to its default chain when unset)
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_region: str = "us-east-1"

    # S3 bucket layout
    s3_bucket_name: str = "file-relay"
    s3_folder: str = "uploads"  # Key prefix: {folder}/{fileId}-{filename}

    # S3-compatible providers (MinIO, R2). Leave unset for AWS.
    s3_endpoint_url: Optional[str] = None
    public_base_url: Optional[str] = None  # Base for permanent URLs off AWS

    # Access URLs
    use_permanent_urls: bool = False  # Public URLs instead of signed URLs
    signed_url_expiration: int = 86400  # 24 hours

    # Uploads are buffered fully in memory, so cap them
    max_upload_size: int = 50 * 1024 * 1024  # 50 MiB

    # Static assets served for any path not matched by the API
    static_dir: str = "public"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )
