"""
OBS V1 request signer

This module provides the signer that turns a SigningContext into a fully
headed request: it assembles the protocol headers, builds the canonical
string and computes the HMAC-SHA1 Authorization header.
"""

import logging
from typing import Optional

from requests.structures import CaseInsensitiveDict

from ..credentials import CredentialStore
from ..exceptions import OBSError, SignatureGenerationError
from .canonical import (
    build_canonical_headers,
    build_canonical_resource,
    build_string_to_sign,
)
from .types import (
    SigningContext,
    SignedRequest,
    AUTHORIZATION_SCHEME,
    META_HEADER_PREFIX,
    SECURITY_TOKEN_HEADER,
    ACL_HEADER,
    STORAGE_CLASS_HEADER,
)
from .utils import (
    format_rfc1123_date,
    hmac_sha1_base64,
    parse_query_items,
    split_url,
)

logger = logging.getLogger(__name__)


class RequestSigner:
    """
    Signer for OBS V1 (``Authorization: OBS ak:signature``) requests.

    The signer reads the active credentials from a CredentialStore exactly
    once per request, so a concurrent ``replace`` never mixes the keys of
    two credentials in one signature.
    """

    def __init__(self, credential_store: CredentialStore):
        """
        Initialize the signer.

        Args:
            credential_store: Store holding the active credentials
        """
        self.credential_store = credential_store

    def sign(self, context: SigningContext) -> SignedRequest:
        """
        Sign a request.

        Args:
            context: Request description

        Returns:
            SignedRequest: Request headers including Date, Host and Authorization

        Raises:
            InvalidTargetError: If the URL cannot be decomposed
            SignatureGenerationError: If the signature cannot be computed
        """
        url_parts = split_url(context.url)
        access_key, secret_key, security_token = self.credential_store.get().resolve()

        try:
            host = url_parts.hostname if url_parts.port is None else f"{url_parts.hostname}:{url_parts.port}"
            headers = self._build_headers(context, host, security_token)

            canonical_headers = build_canonical_headers(headers)
            canonical_resource = build_canonical_resource(
                context.bucket_name,
                context.object_key,
                parse_query_items(url_parts.query),
            )
            string_to_sign = build_string_to_sign(
                context.method.value,
                headers["Date"],
                canonical_headers,
                canonical_resource,
                content_md5=headers.get("Content-MD5"),
                content_type=headers.get("Content-Type"),
            )

            signature = hmac_sha1_base64(secret_key, string_to_sign)
        except OBSError:
            raise
        except Exception as e:
            raise SignatureGenerationError(str(e), {"url": context.url})

        headers["Authorization"] = f"{AUTHORIZATION_SCHEME} {access_key}:{signature}"
        logger.debug(f"Signed {context.method.value} {context.url}; string to sign: {string_to_sign!r}")

        return SignedRequest(
            method=context.method,
            url=context.url,
            headers=headers,
            string_to_sign=string_to_sign,
        )

    def _build_headers(
        self,
        context: SigningContext,
        host: str,
        security_token: Optional[str]
    ) -> CaseInsensitiveDict:
        headers = CaseInsensitiveDict(context.headers)

        headers["Date"] = format_rfc1123_date(context.date)
        headers["Host"] = host

        if context.content_type:
            headers["Content-Type"] = context.content_type
        if context.content_md5:
            headers["Content-MD5"] = context.content_md5

        if security_token is not None:
            headers[SECURITY_TOKEN_HEADER] = security_token

        if context.acl is not None:
            headers[ACL_HEADER] = context.acl.value
        if context.storage_class is not None:
            headers[STORAGE_CLASS_HEADER] = context.storage_class.value

        for key, value in context.metadata.items():
            headers[f"{META_HEADER_PREFIX}{key}"] = value

        if context.server_side_encryption is not None:
            headers.update(context.server_side_encryption.headers())

        return headers
