"""
S3 storage client.

Uses boto3 to talk to an S3 bucket (or any S3-compatible storage when an
endpoint URL is configured). Wraps the four calls the relay needs:
put object, set object ACL, list by prefix and presign a GET.

Failures from botocore are raised as StorageError so the HTTP layer can
log the cause and answer with a generic message. The ACL call is the one
exception: a refusal is an expected outcome and comes back as
AclResult.UNSUPPORTED.
"""
import logging
from enum import Enum
from typing import Optional
import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from relay.config import Settings
from relay.storage.keys import build_public_url

logger = logging.getLogger(__name__)

# Error codes S3 returns when the bucket has ACLs disabled
# (Object Ownership = BucketOwnerEnforced)
ACL_UNSUPPORTED_CODES = {"AccessControlListNotSupported"}


class AclResult(str, Enum):
    """Outcome of making an object public-read."""
    APPLIED = "applied"
    UNSUPPORTED = "unsupported"


class StorageError(Exception):
    """A storage operation failed. The cause stays server-side."""

    def __init__(self, operation: str, cause: Exception):
        self.operation = operation
        self.cause = cause
        super().__init__(f"S3 {operation} failed: {cause}")


class S3Client:
    """
    boto3 wrapper bound to one bucket.

    The underlying boto3 client is thread-safe and shared by all requests.
    A preconfigured client can be injected for tests.
    """

    def __init__(self, settings: Settings, client=None):
        self._settings = settings
        self._client = client if client is not None else self._create_client(settings)
        logger.info(f"S3 client initialized for bucket: {settings.s3_bucket_name}")

    @staticmethod
    def _create_client(settings: Settings):
        """
        Build the boto3 S3 client from settings.

        Signature v4 is forced so presigned URLs carry X-Amz-Expires.
        Custom endpoints (MinIO, R2) get path-style addressing.
        """
        s3_config = {'addressing_style': 'path'} if settings.s3_endpoint_url else {}
        return boto3.client(
            's3',
            endpoint_url=settings.s3_endpoint_url,
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            region_name=settings.aws_region,
            config=Config(signature_version='s3v4', s3=s3_config)
        )

    @property
    def bucket(self) -> str:
        """Get configured bucket name."""
        return self._settings.s3_bucket_name

    def put_object(self, object_key: str, body: bytes, content_type: str) -> None:
        """
        Upload bytes under object_key with no ACL (bucket default, private).

        Args:
            object_key: The S3 object key (path in bucket)
            body: File content
            content_type: MIME type stored on the object

        Raises:
            StorageError: If the upload fails
        """
        try:
            self._client.put_object(
                Bucket=self.bucket,
                Key=object_key,
                Body=body,
                ContentType=content_type,
            )
            logger.debug(f"Uploaded {object_key} ({len(body)} bytes)")
        except (ClientError, BotoCoreError) as e:
            raise StorageError("put_object", e) from e

    def make_public(self, object_key: str) -> AclResult:
        """
        Try to set the object's ACL to public-read.

        Buckets with ACLs disabled refuse the call. That is expected: public
        access then has to come from a bucket policy configured out-of-band,
        so the refusal is returned as AclResult.UNSUPPORTED, not raised.

        Raises:
            StorageError: On transport failures (no response from S3)
        """
        try:
            self._client.put_object_acl(
                Bucket=self.bucket,
                Key=object_key,
                ACL='public-read',
            )
            return AclResult.APPLIED
        except ClientError as e:
            code = e.response.get('Error', {}).get('Code', '')
            if code in ACL_UNSUPPORTED_CODES:
                logger.debug(f"Bucket refused ACL for {object_key} ({code})")
            else:
                logger.warning(
                    f"Could not set public-read ACL on {object_key} ({code}), "
                    "relying on bucket policy for public access"
                )
            return AclResult.UNSUPPORTED
        except BotoCoreError as e:
            raise StorageError("put_object_acl", e) from e

    def find_first_key(self, prefix: str) -> Optional[str]:
        """
        Return the first key in the bucket that starts with prefix.

        "First" is whatever S3 lists first. When several objects share the
        prefix no other tie-break is applied.

        Returns:
            The object key, or None if nothing matches

        Raises:
            StorageError: If the listing fails
        """
        try:
            response = self._client.list_objects_v2(
                Bucket=self.bucket,
                Prefix=prefix,
                MaxKeys=1,
            )
        except (ClientError, BotoCoreError) as e:
            raise StorageError("list_objects_v2", e) from e

        contents = response.get('Contents', [])
        if not contents:
            return None
        return contents[0]['Key']

    def generate_presigned_read_url(self, object_key: str, expiration: int) -> str:
        """
        Generate a presigned GET URL for reading an object.

        Signing is local; no request is sent to S3.

        Args:
            object_key: The S3 object key
            expiration: URL validity in seconds

        Raises:
            StorageError: If the URL cannot be signed
        """
        try:
            url = self._client.generate_presigned_url(
                ClientMethod='get_object',
                Params={
                    'Bucket': self.bucket,
                    'Key': object_key,
                },
                ExpiresIn=expiration
            )
        except (ClientError, BotoCoreError) as e:
            raise StorageError("generate_presigned_url", e) from e

        logger.debug(f"Generated presigned read URL for {object_key} (expires in {expiration}s)")
        return url

    def public_url(self, object_key: str) -> str:
        """Permanent URL for object_key. Built locally."""
        return build_public_url(
            self.bucket,
            self._settings.aws_region,
            object_key,
            self._settings.public_base_url,
        )

    def check_bucket(self) -> None:
        """
        Verify the bucket is reachable with the configured credentials.

        Raises:
            StorageError: If HeadBucket fails
        """
        try:
            self._client.head_bucket(Bucket=self.bucket)
        except (ClientError, BotoCoreError) as e:
            raise StorageError("head_bucket", e) from e
