"""
OBS Python SDK
Signed, retrying object uploads for OBS-compatible object storage
"""

import logging

from .version import __version__
from .exceptions import (
    OBSError,
    InvalidConfigurationError,
    SignatureGenerationError,
    InvalidTargetError,
    FileAccessError,
    NetworkError,
    HTTPError,
    ResponseDecodingError,
    InternalError,
    UnknownError,
)
from .credentials import (
    Credentials,
    CredentialKind,
    CredentialStore,
)
from .models import (
    ObjectACL,
    StorageClass,
    EncryptionMode,
    ServerSideEncryption,
    BodyKind,
    RequestBody,
    UploadObjectRequest,
    UploadFileRequest,
    UploadResponse,
)
from .xml_errors import ErrorResponse, parse_error_response
from .signing import (
    RequestSigner,
    SigningContext,
    SignedRequest,
    HttpMethod,
    md5_base64,
    md5_base64_file,
)
from .http_clients import (
    Transport,
    TransportResponse,
    HttpxTransport,
    RequestsTransport,
    RetryingExecutor,
    is_retryable_transport_error,
)
from .config import OBSConfiguration
from .logging_config import configure_logging
from .client import OBSClient

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    '__version__',
    # Client
    'OBSClient',
    'OBSConfiguration',
    'configure_logging',
    # Credentials
    'Credentials',
    'CredentialKind',
    'CredentialStore',
    # Models
    'ObjectACL',
    'StorageClass',
    'EncryptionMode',
    'ServerSideEncryption',
    'BodyKind',
    'RequestBody',
    'UploadObjectRequest',
    'UploadFileRequest',
    'UploadResponse',
    'ErrorResponse',
    'parse_error_response',
    # Signing
    'RequestSigner',
    'SigningContext',
    'SignedRequest',
    'HttpMethod',
    'md5_base64',
    'md5_base64_file',
    # Delivery
    'Transport',
    'TransportResponse',
    'HttpxTransport',
    'RequestsTransport',
    'RetryingExecutor',
    'is_retryable_transport_error',
    # Exceptions
    'OBSError',
    'InvalidConfigurationError',
    'SignatureGenerationError',
    'InvalidTargetError',
    'FileAccessError',
    'NetworkError',
    'HTTPError',
    'ResponseDecodingError',
    'InternalError',
    'UnknownError',
]
