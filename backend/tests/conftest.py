"""
Test configuration and fixtures.
Uses moto's in-process S3 (mock_aws) instead of a real bucket.
"""
import os

# Fake credentials before any boto3 client is created
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
os.environ["AWS_SECURITY_TOKEN"] = "testing"
os.environ["AWS_SESSION_TOKEN"] = "testing"
os.environ["AWS_DEFAULT_REGION"] = "us-east-1"

import pytest
from typing import AsyncGenerator, Callable
from unittest.mock import MagicMock

import boto3
from httpx import AsyncClient, ASGITransport
from moto import mock_aws

from relay.config import Settings
from relay.main import create_app
from relay.storage.s3_client import S3Client


TEST_BUCKET = "relay-test"
TEST_REGION = "us-east-1"


@pytest.fixture
def static_dir(tmp_path) -> str:
    """Static asset directory with a minimal upload page."""
    directory = tmp_path / "public"
    directory.mkdir()
    (directory / "index.html").write_text("<html><body>File Relay</body></html>")
    return str(directory)


@pytest.fixture
def make_settings(static_dir: str) -> Callable[..., Settings]:
    """Factory for Settings that ignores any .env file on disk."""
    def _make(**overrides) -> Settings:
        values = {
            "aws_access_key_id": "testing",
            "aws_secret_access_key": "testing",
            "aws_region": TEST_REGION,
            "s3_bucket_name": TEST_BUCKET,
            "s3_folder": "uploads",
            "use_permanent_urls": False,
            "static_dir": static_dir,
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def settings(make_settings) -> Settings:
    """Signed-URL mode settings."""
    return make_settings()


@pytest.fixture
def permanent_settings(make_settings) -> Settings:
    """Permanent-URL mode settings."""
    return make_settings(use_permanent_urls=True)


@pytest.fixture
def s3():
    """Raw boto3 client against moto with the test bucket created."""
    with mock_aws():
        client = boto3.client("s3", region_name=TEST_REGION)
        client.create_bucket(Bucket=TEST_BUCKET)
        yield client


@pytest.fixture
def storage(s3, settings: Settings) -> S3Client:
    """S3Client built from settings, backed by moto."""
    return S3Client(settings)


@pytest.fixture
def permanent_storage(s3, permanent_settings: Settings) -> S3Client:
    return S3Client(permanent_settings)


@pytest.fixture
def failing_s3() -> MagicMock:
    """boto3 client stand-in; tests set side effects on it."""
    return MagicMock()


def build_client(settings: Settings, storage: S3Client) -> AsyncClient:
    """Create async HTTP client for API testing."""
    app = create_app(settings=settings, storage=storage)
    transport = ASGITransport(app=app)
    return AsyncClient(transport=transport, base_url="http://test")


@pytest.fixture
async def client(settings: Settings, storage: S3Client) -> AsyncGenerator[AsyncClient, None]:
    """Client for an app in signed-URL mode."""
    async with build_client(settings, storage) as ac:
        yield ac


@pytest.fixture
async def permanent_client(
    permanent_settings: Settings,
    permanent_storage: S3Client
) -> AsyncGenerator[AsyncClient, None]:
    """Client for an app in permanent-URL mode."""
    async with build_client(permanent_settings, permanent_storage) as ac:
        yield ac


@pytest.fixture
async def failing_client(settings: Settings, failing_s3: MagicMock) -> AsyncGenerator[AsyncClient, None]:
    """Client whose storage calls go to a MagicMock."""
    storage = S3Client(settings, client=failing_s3)
    async with build_client(settings, storage) as ac:
        yield ac
