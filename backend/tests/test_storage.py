"""
Tests for the S3 storage client and key helpers.
"""
import pytest
from urllib.parse import parse_qs, urlparse
from unittest.mock import MagicMock

from botocore.exceptions import ClientError, EndpointConnectionError

from relay.storage.keys import build_key_prefix, build_object_key, build_public_url
from relay.storage.s3_client import AclResult, S3Client, StorageError


def client_error(code: str, operation: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": f"{code} raised"}}, operation)


class TestKeys:
    """Tests for object key and URL helpers."""

    def test_object_key_format(self):
        """Test key is folder, id and original name."""
        key = build_object_key("uploads", "abc-123", "report.pdf")
        assert key == "uploads/abc-123-report.pdf"

    def test_object_key_keeps_filename_verbatim(self):
        """Test the client filename is not sanitized."""
        key = build_object_key("uploads", "id", "my photo (1).JPG")
        assert key == "uploads/id-my photo (1).JPG"

    def test_prefix_matches_key(self):
        """Test the lookup prefix is a prefix of the stored key."""
        key = build_object_key("files", "abc", "a.txt")
        assert key.startswith(build_key_prefix("files", "abc"))

    def test_public_url_virtual_hosted(self):
        """Test permanent URL follows the S3 virtual-hosted style."""
        url = build_public_url("bucket", "eu-west-1", "uploads/id-a.txt")
        assert url == "https://bucket.s3.eu-west-1.amazonaws.com/uploads/id-a.txt"

    def test_public_url_encodes_key(self):
        """Test spaces and reserved characters are percent-encoded."""
        url = build_public_url("bucket", "us-east-1", "uploads/id-my file#1.txt")
        assert url == "https://bucket.s3.us-east-1.amazonaws.com/uploads/id-my%20file%231.txt"

    def test_public_url_custom_base(self):
        """Test a configured public base URL replaces the AWS host."""
        url = build_public_url(
            "bucket", "auto", "uploads/id-a.txt",
            public_base_url="https://cdn.example.com/"
        )
        assert url == "https://cdn.example.com/uploads/id-a.txt"


class TestS3Client:
    """Tests for S3Client against moto."""

    def test_put_object_stores_bytes_and_type(self, storage: S3Client, s3):
        """Test content and content type are written as given."""
        storage.put_object("uploads/x-hello.txt", b"hello", "text/plain")

        obj = s3.get_object(Bucket=storage.bucket, Key="uploads/x-hello.txt")
        assert obj["Body"].read() == b"hello"
        assert obj["ContentType"] == "text/plain"

    def test_find_first_key(self, storage: S3Client):
        """Test prefix lookup returns the stored key."""
        storage.put_object("uploads/abc-a.txt", b"a", "text/plain")

        assert storage.find_first_key("uploads/abc") == "uploads/abc-a.txt"

    def test_find_first_key_no_match(self, storage: S3Client):
        """Test prefix lookup on an empty prefix returns None."""
        storage.put_object("uploads/abc-a.txt", b"a", "text/plain")

        assert storage.find_first_key("uploads/zzz") is None

    def test_find_first_key_respects_folder(self, storage: S3Client):
        """Test objects in another folder do not match."""
        storage.put_object("other/abc-a.txt", b"a", "text/plain")

        assert storage.find_first_key("uploads/abc") is None

    def test_make_public_applied(self, storage: S3Client, s3):
        """Test ACL is set to public-read when the bucket allows it."""
        storage.put_object("uploads/x-a.txt", b"a", "text/plain")

        result = storage.make_public("uploads/x-a.txt")

        assert result == AclResult.APPLIED
        acl = s3.get_object_acl(Bucket=storage.bucket, Key="uploads/x-a.txt")
        grantees = [grant["Grantee"].get("URI", "") for grant in acl["Grants"]]
        assert any(uri.endswith("/global/AllUsers") for uri in grantees)

    def test_presigned_url_expiry(self, storage: S3Client):
        """Test signed URL is a SigV4 GET URL valid for the given seconds."""
        url = storage.generate_presigned_read_url("uploads/x-a.txt", 86400)

        parsed = urlparse(url)
        query = parse_qs(parsed.query)
        assert parsed.path.endswith("uploads/x-a.txt")
        assert query["X-Amz-Expires"] == ["86400"]
        assert "X-Amz-Signature" in query
        assert "X-Amz-Date" in query

    def test_public_url_uses_settings(self, storage: S3Client):
        """Test public URL comes from bucket and region settings."""
        url = storage.public_url("uploads/x-a.txt")
        assert url == f"https://{storage.bucket}.s3.us-east-1.amazonaws.com/uploads/x-a.txt"

    def test_check_bucket(self, storage: S3Client):
        """Test an existing bucket passes the health check."""
        storage.check_bucket()

    def test_check_bucket_missing(self, s3, make_settings):
        """Test a missing bucket raises StorageError."""
        storage = S3Client(make_settings(s3_bucket_name="does-not-exist"))

        with pytest.raises(StorageError) as exc_info:
            storage.check_bucket()

        assert exc_info.value.operation == "head_bucket"


class TestS3ClientFailures:
    """Tests for error mapping with a mocked boto3 client."""

    def test_acl_not_supported(self, settings):
        """Test a bucket with ACLs disabled gives UNSUPPORTED, not an error."""
        boto_client = MagicMock()
        boto_client.put_object_acl.side_effect = client_error(
            "AccessControlListNotSupported", "PutObjectAcl"
        )
        storage = S3Client(settings, client=boto_client)

        assert storage.make_public("uploads/x-a.txt") == AclResult.UNSUPPORTED

    def test_acl_refused_for_other_reason(self, settings):
        """Test any refusal from S3 is still treated as unsupported."""
        boto_client = MagicMock()
        boto_client.put_object_acl.side_effect = client_error("AccessDenied", "PutObjectAcl")
        storage = S3Client(settings, client=boto_client)

        assert storage.make_public("uploads/x-a.txt") == AclResult.UNSUPPORTED

    def test_acl_transport_failure_raises(self, settings):
        """Test a connection failure during the ACL call is a StorageError."""
        boto_client = MagicMock()
        boto_client.put_object_acl.side_effect = EndpointConnectionError(
            endpoint_url="https://s3.amazonaws.com"
        )
        storage = S3Client(settings, client=boto_client)

        with pytest.raises(StorageError) as exc_info:
            storage.make_public("uploads/x-a.txt")

        assert exc_info.value.operation == "put_object_acl"

    def test_put_object_failure(self, settings):
        """Test upload errors are wrapped with the operation name."""
        boto_client = MagicMock()
        boto_client.put_object.side_effect = client_error("AccessDenied", "PutObject")
        storage = S3Client(settings, client=boto_client)

        with pytest.raises(StorageError) as exc_info:
            storage.put_object("uploads/x-a.txt", b"a", "text/plain")

        assert exc_info.value.operation == "put_object"
        assert isinstance(exc_info.value.cause, ClientError)

    def test_list_failure(self, settings):
        """Test listing errors are wrapped."""
        boto_client = MagicMock()
        boto_client.list_objects_v2.side_effect = client_error("NoSuchBucket", "ListObjectsV2")
        storage = S3Client(settings, client=boto_client)

        with pytest.raises(StorageError) as exc_info:
            storage.find_first_key("uploads/abc")

        assert exc_info.value.operation == "list_objects_v2"

    def test_list_response_without_contents(self, settings):
        """Test a listing with no Contents key means no match."""
        boto_client = MagicMock()
        boto_client.list_objects_v2.return_value = {"KeyCount": 0}
        storage = S3Client(settings, client=boto_client)

        assert storage.find_first_key("uploads/abc") is None
        boto_client.list_objects_v2.assert_called_once_with(
            Bucket=settings.s3_bucket_name,
            Prefix="uploads/abc",
            MaxKeys=1
        )
