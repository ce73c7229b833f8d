"""
Object key and public URL helpers.

Key pattern: {folder}/{file_id}-{original_filename}

The file id is the first segment after the folder, so a prefix search on
{folder}/{file_id} finds the object again without any database.
"""
from typing import Optional
from urllib.parse import quote


def build_object_key(folder: str, file_id: str, filename: str) -> str:
    """
    Build the storage key for an uploaded file.

    The original filename is kept exactly as the client sent it.
    """
    return f"{folder}/{file_id}-{filename}"


def build_key_prefix(folder: str, file_id: str) -> str:
    """Prefix used to find the object stored for file_id."""
    return f"{folder}/{file_id}"


def build_public_url(
    bucket: str,
    region: str,
    object_key: str,
    public_base_url: Optional[str] = None
) -> str:
    """
    Build the permanent (public) URL for an object.

    Uses the S3 virtual-hosted style unless a public base URL is configured
    for an S3-compatible provider. No network call is made.
    """
    encoded_key = quote(object_key, safe="/~")
    if public_base_url:
        return f"{public_base_url.rstrip('/')}/{encoded_key}"
    return f"https://{bucket}.s3.{region}.amazonaws.com/{encoded_key}"
