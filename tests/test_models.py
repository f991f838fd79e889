"""
Tests for request and response models
"""

import base64
from pathlib import Path

import pytest

from obs_sdk.models import (
    BodyKind,
    EncryptionMode,
    RequestBody,
    ServerSideEncryption,
    UploadFileRequest,
    UploadResponse,
)
from obs_sdk.exceptions import InvalidConfigurationError
from obs_sdk.http_clients import TransportResponse
from obs_sdk.signing import md5_base64


class TestServerSideEncryption:
    """Test encryption directives"""

    def test_kms_headers(self):
        """Test SSE-KMS headers"""
        assert ServerSideEncryption.kms("key").headers() == {
            "x-obs-server-side-encryption": "kms",
            "x-obs-server-side-encryption-kms-key-id": "key",
        }

    def test_customer_key_headers(self):
        """Test SSE-C headers"""
        key = b"k" * 32
        sse = ServerSideEncryption.with_customer_key(key)
        assert sse.mode == EncryptionMode.SSE_C
        assert sse.headers() == {
            "x-obs-server-side-encryption-customer-algorithm": "AES256",
            "x-obs-server-side-encryption-customer-key": base64.b64encode(key).decode(),
            "x-obs-server-side-encryption-customer-key-md5": md5_base64(key),
        }

    def test_customer_key_required(self):
        """Test SSE-C without a key is rejected"""
        with pytest.raises(InvalidConfigurationError):
            ServerSideEncryption(EncryptionMode.SSE_C)


class TestRequestBody:
    """Test request body variants"""

    def test_variants(self, tmp_path):
        """Test each constructor sets its kind"""
        assert RequestBody.empty().kind == BodyKind.EMPTY
        body = RequestBody.from_bytes(bytearray(b"abc"))
        assert body.kind == BodyKind.DATA
        assert body.data == b"abc"
        file_body = RequestBody.from_file(tmp_path / "a.bin")
        assert file_body.kind == BodyKind.FILE
        assert file_body.path == str(tmp_path / "a.bin")

    def test_upload_file_request_accepts_paths(self):
        """Test path-like file paths are normalised to strings"""
        request = UploadFileRequest(bucket_name="b", object_key="k", file_path=Path("/tmp/x.bin"))
        assert request.file_path == str(Path("/tmp/x.bin"))


class TestUploadResponse:
    """Test response mapping"""

    def test_from_response(self):
        """Test fields are extracted case-insensitively and ETag unquoted"""
        response = TransportResponse(200, {
            "etag": '"d41d8cd98f00b204e9800998ecf8427e"',
            "X-OBS-VERSION-ID": "v-1",
            "x-obs-storage-class": "WARM",
            "x-obs-server-side-encryption": "kms",
        })
        result = UploadResponse.from_response(response)
        assert result.status_code == 200
        assert result.etag == "d41d8cd98f00b204e9800998ecf8427e"
        assert result.version_id == "v-1"
        assert result.storage_class == "WARM"
        assert result.server_side_encryption == "kms"

    def test_missing_headers(self):
        """Test absent headers map to None"""
        result = UploadResponse.from_response(TransportResponse(200))
        assert result == UploadResponse(status_code=200)

    def test_to_dict(self):
        """Test dictionary rendering"""
        result = UploadResponse(status_code=200, etag="e")
        assert result.to_dict() == {
            "status_code": 200,
            "etag": "e",
            "version_id": None,
            "storage_class": None,
            "server_side_encryption": None,
        }
