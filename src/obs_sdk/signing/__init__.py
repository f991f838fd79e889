"""
OBS Python SDK - Request Signing Module

OBS V1 signatures: HMAC-SHA1 over a canonical string built from the request
verb, content headers, date, x-obs-* headers and the target resource.
"""

from .types import (
    HttpMethod,
    SigningContext,
    SignedRequest,
    SUB_RESOURCES,
    AUTHORIZATION_SCHEME,
)

from .canonical import (
    canonical_header_items,
    build_canonical_headers,
    build_canonical_resource,
    build_string_to_sign,
)

from .signer import RequestSigner

from .utils import (
    format_rfc1123_date,
    md5_base64,
    md5_base64_file,
    hmac_sha1_base64,
    parse_query_items,
    split_url,
    encode_object_key,
    encode_query_items,
)

__all__ = [
    # Core signing functionality
    'RequestSigner',
    # Types
    'HttpMethod',
    'SigningContext',
    'SignedRequest',
    'SUB_RESOURCES',
    'AUTHORIZATION_SCHEME',
    # Canonicalization
    'canonical_header_items',
    'build_canonical_headers',
    'build_canonical_resource',
    'build_string_to_sign',
    # Utilities
    'format_rfc1123_date',
    'md5_base64',
    'md5_base64_file',
    'hmac_sha1_base64',
    'parse_query_items',
    'split_url',
    'encode_object_key',
    'encode_query_items',
]
