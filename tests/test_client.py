"""
Test suite for OBSClient

Exercises uploads end to end against a stub transport: signing, URL
construction, body dispatch, file checks and credential refresh.
"""

import os

import pytest

from obs_sdk import (
    OBSClient,
    OBSConfiguration,
    Credentials,
    UploadObjectRequest,
    UploadFileRequest,
    ObjectACL,
    StorageClass,
    ServerSideEncryption,
    RetryingExecutor,
    HttpxTransport,
)
from obs_sdk.exceptions import FileAccessError, HTTPError, InvalidConfigurationError, InvalidTargetError
from obs_sdk.signing import md5_base64

from conftest import (
    BUCKET,
    OBJECT_KEY,
    ENDPOINT,
    FIXED_DATE,
    FIXED_DATE_STRING,
    FORBIDDEN_XML,
    StubTransport,
    error_response,
    success_response,
)


@pytest.fixture
def configuration(permanent_credentials):
    return OBSConfiguration(endpoint=ENDPOINT, credentials=permanent_credentials)


@pytest.fixture
def client(configuration, stub_transport):
    return OBSClient(configuration, transport=stub_transport)


class TestClientConstruction:
    """Test client wiring"""

    def test_default_transport(self, configuration):
        """Test an httpx transport is created when none is given"""
        client = OBSClient(configuration)
        assert isinstance(client.executor, RetryingExecutor)
        assert isinstance(client.executor.transport, HttpxTransport)
        assert client.executor.max_retry_count == configuration.max_retry_count

    def test_custom_executor(self, configuration, stub_transport):
        """Test an injected executor is used as is"""
        executor = RetryingExecutor(stub_transport, max_retry_count=0)
        client = OBSClient(configuration, executor=executor)
        assert client.executor is executor

    @pytest.mark.asyncio
    async def test_close_leaves_injected_transport(self, configuration, stub_transport):
        """Test injected transports are not closed by the client"""
        async with OBSClient(configuration, transport=stub_transport):
            pass
        assert not stub_transport.closed


class TestBuildUrl:
    """Test object URL construction"""

    def test_virtual_hosted_url(self, client):
        """Test bucket is placed in the host name"""
        assert client.build_url(BUCKET, OBJECT_KEY) == f"https://{BUCKET}.{ENDPOINT}/{OBJECT_KEY}"

    def test_key_is_encoded(self, client):
        """Test keys are percent-encoded with slashes kept"""
        assert client.build_url(BUCKET, "photos/2025/my photo.jpg") == \
            f"https://{BUCKET}.{ENDPOINT}/photos/2025/my%20photo.jpg"

    def test_query_parameters(self, client):
        """Test bare and valued query parameters"""
        url = client.build_url(BUCKET, OBJECT_KEY, {"acl": None, "versionId": "v1"})
        assert url.endswith("?acl&versionId=v1")

    def test_http_scheme(self, permanent_credentials, stub_transport):
        """Test use_ssl=False yields http URLs"""
        configuration = OBSConfiguration(endpoint=ENDPOINT, credentials=permanent_credentials, use_ssl=False)
        client = OBSClient(configuration, transport=stub_transport)
        assert client.build_url(BUCKET, OBJECT_KEY).startswith("http://")

    @pytest.mark.parametrize("bucket,key", [("", OBJECT_KEY), (BUCKET, "")])
    def test_empty_target(self, client, bucket, key):
        """Test empty bucket or key is rejected"""
        with pytest.raises(InvalidTargetError):
            client.build_url(bucket, key)


class TestUploadObject:
    """Test uploading in-memory data"""

    @pytest.mark.asyncio
    async def test_upload_object(self, client, stub_transport, permanent_credentials):
        """Test a signed PUT carrying the data is sent"""
        stub_transport.queue(success_response())
        request = UploadObjectRequest(
            bucket_name=BUCKET,
            object_key=OBJECT_KEY,
            data=b"Hello, OBS!",
            content_type="text/plain",
            metadata={"author": "tester"},
            date=FIXED_DATE,
        )

        response = await client.upload_object(request)

        assert response.status_code == 200
        assert response.etag == "success-etag"
        assert response.version_id == "xyz-789"
        assert response.storage_class == "STANDARD"

        operation, signed, payload = stub_transport.calls[0]
        assert operation == "send_data"
        assert payload == b"Hello, OBS!"
        assert signed.method.value == "PUT"
        assert signed.url == f"https://{BUCKET}.{ENDPOINT}/{OBJECT_KEY}"
        assert signed.headers["Content-Length"] == "11"
        assert signed.headers["Content-Type"] == "text/plain"
        assert signed.headers["Date"] == FIXED_DATE_STRING
        assert signed.headers["x-obs-meta-author"] == "tester"
        assert signed.headers["Authorization"].startswith(f"OBS {permanent_credentials.access_key}:")
        assert signed.string_to_sign == (
            f"PUT\n\ntext/plain\n{FIXED_DATE_STRING}\nx-obs-meta-author:tester\n/{BUCKET}/{OBJECT_KEY}"
        )

    @pytest.mark.asyncio
    async def test_default_content_type(self, client, stub_transport):
        """Test application/octet-stream is used when no type is given"""
        stub_transport.queue(success_response())
        await client.upload_object(UploadObjectRequest(bucket_name=BUCKET, object_key=OBJECT_KEY, data=b"x"))

        signed = stub_transport.calls[0][1]
        assert signed.headers["Content-Type"] == "application/octet-stream"

    @pytest.mark.asyncio
    async def test_upload_options(self, client, stub_transport):
        """Test ACL, storage class, MD5 and encryption headers are sent"""
        stub_transport.queue(success_response(**{"x-obs-server-side-encryption": "kms"}))
        data = b"secret data"
        request = UploadObjectRequest(
            bucket_name=BUCKET,
            object_key=OBJECT_KEY,
            data=data,
            acl=ObjectACL.PUBLIC_READ,
            storage_class=StorageClass.COLD,
            content_md5=md5_base64(data),
            server_side_encryption=ServerSideEncryption.kms("key-1"),
        )

        response = await client.upload_object(request)

        signed = stub_transport.calls[0][1]
        assert signed.headers["x-obs-acl"] == "public-read"
        assert signed.headers["x-obs-storage-class"] == "COLD"
        assert signed.headers["Content-MD5"] == md5_base64(data)
        assert signed.headers["x-obs-server-side-encryption-kms-key-id"] == "key-1"
        assert response.server_side_encryption == "kms"

    @pytest.mark.asyncio
    async def test_explicit_content_length(self, client, stub_transport):
        """Test an explicit content length overrides the data length"""
        stub_transport.queue(success_response())
        await client.upload_object(
            UploadObjectRequest(bucket_name=BUCKET, object_key=OBJECT_KEY, data=b"abc", content_length=3)
        )
        assert stub_transport.calls[0][1].headers["Content-Length"] == "3"

    @pytest.mark.asyncio
    async def test_empty_object(self, client, stub_transport):
        """Test zero-length objects can be uploaded"""
        stub_transport.queue(success_response())
        await client.upload_object(UploadObjectRequest(bucket_name=BUCKET, object_key=OBJECT_KEY))
        assert stub_transport.calls[0][1].headers["Content-Length"] == "0"

    @pytest.mark.asyncio
    async def test_server_rejection(self, client, stub_transport):
        """Test a 403 surfaces as HTTPError"""
        stub_transport.queue(error_response(403, FORBIDDEN_XML))
        with pytest.raises(HTTPError) as exc_info:
            await client.upload_object(UploadObjectRequest(bucket_name=BUCKET, object_key=OBJECT_KEY, data=b"x"))
        assert exc_info.value.response.code == "AccessDenied"

    @pytest.mark.asyncio
    async def test_invalid_target_not_sent(self, client, stub_transport):
        """Test an unusable target fails before anything is sent"""
        with pytest.raises(InvalidTargetError):
            await client.upload_object(UploadObjectRequest(bucket_name="", object_key=OBJECT_KEY, data=b"x"))
        assert stub_transport.calls == []


class TestUploadFile:
    """Test uploading local files"""

    @pytest.mark.asyncio
    async def test_upload_file(self, client, stub_transport, tmp_path):
        """Test files are sent by path with their size as Content-Length"""
        path = tmp_path / "report.csv"
        path.write_bytes(b"a,b,c\n1,2,3\n")
        stub_transport.queue(success_response())

        response = await client.upload_file(
            UploadFileRequest(bucket_name=BUCKET, object_key="reports/report.csv", file_path=path)
        )

        assert response.status_code == 200
        operation, signed, payload = stub_transport.calls[0]
        assert operation == "send_file"
        assert payload == str(path)
        assert signed.headers["Content-Length"] == str(len(b"a,b,c\n1,2,3\n"))
        assert signed.url.endswith("/reports/report.csv")
        assert signed.string_to_sign.endswith(f"/{BUCKET}/reports/report.csv")

    @pytest.mark.asyncio
    async def test_missing_file(self, client, stub_transport, tmp_path):
        """Test a missing file fails before anything is sent"""
        missing = str(tmp_path / "missing.txt")
        with pytest.raises(FileAccessError) as exc_info:
            await client.upload_file(UploadFileRequest(bucket_name=BUCKET, object_key=OBJECT_KEY, file_path=missing))

        assert exc_info.value.path == missing
        assert isinstance(exc_info.value.underlying_error, FileNotFoundError)
        assert stub_transport.calls == []

    @pytest.mark.asyncio
    async def test_directory_rejected(self, client, stub_transport, tmp_path):
        """Test directories are not uploadable"""
        with pytest.raises(FileAccessError):
            await client.upload_file(
                UploadFileRequest(bucket_name=BUCKET, object_key=OBJECT_KEY, file_path=str(tmp_path))
            )
        assert stub_transport.calls == []

    @pytest.mark.asyncio
    @pytest.mark.skipif(not hasattr(os, "geteuid") or os.geteuid() == 0, reason="root can read any file")
    async def test_unreadable_file(self, client, stub_transport, tmp_path):
        """Test unreadable files fail before anything is sent"""
        path = tmp_path / "private.bin"
        path.write_bytes(b"data")
        path.chmod(0)
        try:
            with pytest.raises(FileAccessError):
                await client.upload_file(
                    UploadFileRequest(bucket_name=BUCKET, object_key=OBJECT_KEY, file_path=str(path))
                )
        finally:
            path.chmod(0o600)
        assert stub_transport.calls == []


class TestRefreshCredentials:
    """Test credential refresh"""

    @pytest.mark.asyncio
    async def test_refresh_applies_to_later_requests(self, client, stub_transport, temporary_credentials):
        """Test refreshed credentials sign only subsequent uploads"""
        stub_transport.queue(success_response(), success_response())
        request = UploadObjectRequest(bucket_name=BUCKET, object_key=OBJECT_KEY, data=b"x", date=FIXED_DATE)

        await client.upload_object(request)
        client.refresh_credentials(temporary_credentials)
        await client.upload_object(request)

        first = stub_transport.calls[0][1]
        second = stub_transport.calls[1][1]
        assert first.headers["Authorization"].startswith("OBS AKPERMANENT:")
        assert "x-obs-security-token" not in first.headers
        assert second.headers["Authorization"].startswith(f"OBS {temporary_credentials.access_key}:")
        assert second.headers["x-obs-security-token"] == temporary_credentials.security_token

    def test_refresh_rejects_invalid(self, client):
        """Test refresh validates its argument"""
        with pytest.raises(InvalidConfigurationError):
            client.refresh_credentials(None)
        assert client.credential_store.get().access_key == "AKPERMANENT"

    @pytest.mark.asyncio
    async def test_retries_reuse_original_signature(self, configuration, temporary_credentials):
        """Test a retried request keeps the signature it was first given"""
        transport = StubTransport([error_response(503), success_response()])

        async def sleep(delay):
            client.refresh_credentials(temporary_credentials)

        executor = RetryingExecutor(transport, max_retry_count=1, sleep=sleep)
        client = OBSClient(configuration, executor=executor)

        await client.upload_object(UploadObjectRequest(bucket_name=BUCKET, object_key=OBJECT_KEY, data=b"x"))

        first, second = transport.calls[0][1], transport.calls[1][1]
        assert first.headers["Authorization"] == second.headers["Authorization"]
        assert client.credential_store.get() is temporary_credentials


class TestConfigurationIntegration:
    """Test the client honours its configuration"""

    def test_retry_count_from_configuration(self):
        """Test max_retry_count reaches the default executor"""
        configuration = OBSConfiguration(
            endpoint=ENDPOINT,
            credentials=Credentials.permanent("AK", "SK"),
            max_retry_count=5,
        )
        assert OBSClient(configuration).executor.max_retry_count == 5
