"""
Request and response models for object uploads

This module provides the value objects callers use to describe an upload,
the request body variants handed to transports, and the mapping from a
successful HTTP response to an UploadResponse.
"""

import base64
import os
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Optional, Any, Union

from .exceptions import InvalidConfigurationError
from .signing.utils import md5_base64

# Server-side encryption header names
SSE_HEADER = "x-obs-server-side-encryption"
SSE_KMS_KEY_ID_HEADER = "x-obs-server-side-encryption-kms-key-id"
SSE_C_ALGORITHM_HEADER = "x-obs-server-side-encryption-customer-algorithm"
SSE_C_KEY_HEADER = "x-obs-server-side-encryption-customer-key"
SSE_C_KEY_MD5_HEADER = "x-obs-server-side-encryption-customer-key-md5"

# Response header names
ETAG_HEADER = "ETag"
VERSION_ID_HEADER = "x-obs-version-id"
STORAGE_CLASS_HEADER = "x-obs-storage-class"


class ObjectACL(str, Enum):
    """Pre-defined access control lists for objects"""
    PRIVATE = "private"
    PUBLIC_READ = "public-read"
    PUBLIC_READ_WRITE = "public-read-write"
    AUTHENTICATED_READ = "authenticated-read"
    BUCKET_OWNER_READ = "bucket-owner-read"
    BUCKET_OWNER_FULL_CONTROL = "bucket-owner-full-control"


class StorageClass(str, Enum):
    """Storage classes for objects"""
    STANDARD = "STANDARD"
    WARM = "WARM"  # infrequent access
    COLD = "COLD"  # archive


class EncryptionMode(str, Enum):
    """Server-side encryption modes"""
    SSE_KMS = "kms"
    SSE_C = "AES256"


@dataclass(frozen=True)
class ServerSideEncryption:
    """
    Server-side encryption directive.

    Use ``kms`` for keys managed by the key management service and
    ``customer_key`` for caller-supplied keys (SSE-C).
    """
    mode: EncryptionMode
    kms_key_id: Optional[str] = None
    customer_key: Optional[bytes] = None

    def __post_init__(self):
        if self.mode == EncryptionMode.SSE_C and not self.customer_key:
            raise InvalidConfigurationError("SSE-C requires a customer key")

    @classmethod
    def kms(cls, key_id: Optional[str] = None) -> 'ServerSideEncryption':
        return cls(EncryptionMode.SSE_KMS, kms_key_id=key_id)

    @classmethod
    def with_customer_key(cls, key: bytes) -> 'ServerSideEncryption':
        return cls(EncryptionMode.SSE_C, customer_key=key)

    def headers(self) -> Dict[str, str]:
        """Get the request headers implementing this directive"""
        if self.mode == EncryptionMode.SSE_KMS:
            headers = {SSE_HEADER: "kms"}
            if self.kms_key_id:
                headers[SSE_KMS_KEY_ID_HEADER] = self.kms_key_id
            return headers

        return {
            SSE_C_ALGORITHM_HEADER: "AES256",
            SSE_C_KEY_HEADER: base64.b64encode(self.customer_key).decode('ascii'),
            SSE_C_KEY_MD5_HEADER: md5_base64(self.customer_key),
        }


class BodyKind(str, Enum):
    """Request body variants"""
    EMPTY = "empty"
    DATA = "data"
    FILE = "file"


@dataclass(frozen=True)
class RequestBody:
    """
    Body of an outgoing request.

    File bodies hold only the path; transports stream the file contents.
    """
    kind: BodyKind
    data: Optional[bytes] = None
    path: Optional[str] = None

    @classmethod
    def empty(cls) -> 'RequestBody':
        return cls(BodyKind.EMPTY)

    @classmethod
    def from_bytes(cls, data: bytes) -> 'RequestBody':
        return cls(BodyKind.DATA, data=bytes(data))

    @classmethod
    def from_file(cls, path: Union[str, 'os.PathLike']) -> 'RequestBody':
        return cls(BodyKind.FILE, path=os.fspath(path))


@dataclass
class UploadRequest:
    """
    Parameters shared by all upload requests.

    Attributes:
        bucket_name: Target bucket
        object_key: Target object key (unencoded)
        content_type: MIME type (defaults to application/octet-stream)
        acl: Canned ACL to apply
        storage_class: Storage class of the new object
        content_md5: Base64 MD5 digest of the body
        content_length: Explicit body length in bytes
        metadata: User metadata sent as x-obs-meta-* headers
        server_side_encryption: Encryption directive
        date: Explicit request date (current time if None)
        query_params: Extra query parameters; None values are sent bare
    """
    bucket_name: str
    object_key: str
    content_type: Optional[str] = None
    acl: Optional[ObjectACL] = None
    storage_class: Optional[StorageClass] = None
    content_md5: Optional[str] = None
    content_length: Optional[int] = None
    metadata: Dict[str, str] = field(default_factory=dict)
    server_side_encryption: Optional[ServerSideEncryption] = None
    date: Optional[datetime] = None
    query_params: Dict[str, Optional[str]] = field(default_factory=dict)


@dataclass
class UploadObjectRequest(UploadRequest):
    """Parameters for uploading an object from an in-memory buffer"""
    data: bytes = b""


@dataclass
class UploadFileRequest(UploadRequest):
    """Parameters for uploading an object from a local file"""
    file_path: str = ""

    def __post_init__(self):
        self.file_path = os.fspath(self.file_path)


def _strip_quotes(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip('"')


@dataclass
class UploadResponse:
    """
    Successful upload result.

    Attributes:
        status_code: HTTP status code
        etag: Object ETag without surrounding quotes
        version_id: Version ID if the bucket has versioning enabled
        storage_class: Storage class of the stored object
        server_side_encryption: Encryption algorithm applied by the server
    """
    status_code: int
    etag: Optional[str] = None
    version_id: Optional[str] = None
    storage_class: Optional[str] = None
    server_side_encryption: Optional[str] = None

    @classmethod
    def from_response(cls, response: Any) -> 'UploadResponse':
        """
        Build an UploadResponse from a successful transport response.

        Args:
            response: Object exposing ``status_code`` and a case-insensitive
                ``headers`` mapping

        Returns:
            UploadResponse: Extracted result fields
        """
        headers = response.headers
        return cls(
            status_code=response.status_code,
            etag=_strip_quotes(headers.get(ETAG_HEADER)),
            version_id=headers.get(VERSION_ID_HEADER),
            storage_class=headers.get(STORAGE_CLASS_HEADER),
            server_side_encryption=headers.get(SSE_HEADER),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'status_code': self.status_code,
            'etag': self.etag,
            'version_id': self.version_id,
            'storage_class': self.storage_class,
            'server_side_encryption': self.server_side_encryption,
        }
