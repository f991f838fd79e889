"""
Type definitions for OBS request signing

This module provides the signing context and signed request data classes
along with the protocol constants of the OBS V1 signature.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Optional, TYPE_CHECKING

from requests.structures import CaseInsensitiveDict

if TYPE_CHECKING:
    from ..models import ObjectACL, StorageClass, ServerSideEncryption


class HttpMethod(str, Enum):
    """HTTP methods supported for signing"""
    GET = "GET"
    PUT = "PUT"
    POST = "POST"
    DELETE = "DELETE"
    HEAD = "HEAD"


AUTHORIZATION_SCHEME = "OBS"
OBS_HEADER_PREFIX = "x-obs-"
META_HEADER_PREFIX = "x-obs-meta-"
SECURITY_TOKEN_HEADER = "x-obs-security-token"
ACL_HEADER = "x-obs-acl"
STORAGE_CLASS_HEADER = "x-obs-storage-class"

# Query parameters that take part in the canonical resource
SUB_RESOURCES = frozenset([
    "acl", "append", "attname", "backtosource", "billing", "cors", "customdomain",
    "delete", "deletebucket", "encryption", "inventory", "length", "lifecycle",
    "location", "logging", "metadata", "modify", "notification", "partNumber",
    "policy", "position", "quota", "rename", "replication", "response-cache-control",
    "response-content-disposition", "response-content-encoding", "response-content-language",
    "response-content-type", "response-expires", "restore", "storageClass", "storageinfo",
    "storagepolicy", "tagging", "truncate", "uploads", "uploadId", "versionId", "versioning",
    "versions", "website", "x-image-process", "x-image-save-bucket", "x-image-save-object",
])


@dataclass
class SigningContext:
    """
    Everything the signer needs to know about one request.

    Attributes:
        method: HTTP method
        url: Full request URL; its query string supplies the sub-resources
        bucket_name: Target bucket
        object_key: Target object key (unencoded)
        date: Explicit request date (current time if None)
        content_type: Content-Type header value
        content_md5: Content-MD5 header value
        content_length: Declared body length
        metadata: User metadata
        acl: Canned ACL
        storage_class: Storage class
        server_side_encryption: Encryption directive
        headers: Extra headers to send; x-obs-* entries are signed
    """
    method: HttpMethod
    url: str
    bucket_name: str
    object_key: str
    date: Optional[datetime] = None
    content_type: Optional[str] = None
    content_md5: Optional[str] = None
    content_length: Optional[int] = None
    metadata: Dict[str, str] = field(default_factory=dict)
    acl: Optional['ObjectACL'] = None
    storage_class: Optional['StorageClass'] = None
    server_side_encryption: Optional['ServerSideEncryption'] = None
    headers: Dict[str, str] = field(default_factory=dict)


@dataclass
class SignedRequest:
    """
    A request carrying its Authorization header.

    Attributes:
        method: HTTP method
        url: Full request URL
        headers: Case-insensitive header mapping including Authorization
        string_to_sign: Canonical string that was signed
    """
    method: HttpMethod
    url: str
    headers: CaseInsensitiveDict
    string_to_sign: str = ""

    def header_dict(self) -> Dict[str, str]:
        """Get headers as a plain dictionary for transports"""
        return dict(self.headers.items())
