"""
Storage module for S3 object storage.

The bucket is the only persistence: file ids live inside object keys and
are recovered with a prefix search.
"""
from relay.storage.s3_client import S3Client, StorageError, AclResult
from relay.storage.keys import build_object_key, build_key_prefix, build_public_url

__all__ = [
    "S3Client",
    "StorageError",
    "AclResult",
    "build_object_key",
    "build_key_prefix",
    "build_public_url",
]
