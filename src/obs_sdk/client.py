"""
High-level client for object uploads

This module provides OBSClient, which combines the credential store, the
request signer and the retrying executor into upload operations for
in-memory buffers and local files.
"""

import logging
import os
import stat
from typing import Optional

from .config import OBSConfiguration
from .credentials import Credentials, CredentialStore
from .exceptions import FileAccessError, InvalidTargetError
from .http_clients import HttpxTransport, RetryingExecutor, Transport
from .logging_config import configure_logging
from .models import (
    RequestBody,
    UploadFileRequest,
    UploadObjectRequest,
    UploadRequest,
    UploadResponse,
)
from .signing import HttpMethod, RequestSigner, SigningContext, SignedRequest
from .signing.utils import encode_object_key, encode_query_items

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class OBSClient:
    """
    Asynchronous OBS client.

    Safe to share between concurrent tasks: uploads only share the
    credential store, whose access is serialized.

    Example:
        async with OBSClient(OBSConfiguration.from_env()) as client:
            response = await client.upload_object(
                UploadObjectRequest(bucket_name="bucket", object_key="a.txt", data=b"hi")
            )
    """

    def __init__(
        self,
        configuration: OBSConfiguration,
        transport: Optional[Transport] = None,
        executor: Optional[RetryingExecutor] = None
    ):
        """
        Initialize the client.

        Args:
            configuration: Client configuration
            transport: Transport to use (httpx-based by default)
            executor: Executor to use; overrides transport when given
        """
        self.configuration = configuration
        if configuration.log_level.lower() != "none":
            configure_logging(configuration.log_level)

        self.credential_store = CredentialStore(configuration.credentials)
        self.signer = RequestSigner(self.credential_store)

        self._owns_transport = transport is None and executor is None
        if executor is None:
            transport = transport or HttpxTransport(
                timeout=configuration.timeout,
                verify_ssl=configuration.verify_ssl,
            )
            executor = RetryingExecutor(transport, max_retry_count=configuration.max_retry_count)
        self.executor = executor

        logger.info(f"OBS client initialized for endpoint: {configuration.endpoint}")

    async def __aenter__(self) -> 'OBSClient':
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def refresh_credentials(self, credentials: Credentials) -> None:
        """
        Replace the credentials used for subsequent requests.

        Requests already signed keep the signature they were given.
        """
        self.credential_store.replace(credentials)
        logger.info("Credentials refreshed successfully.")

    async def upload_object(self, request: UploadObjectRequest) -> UploadResponse:
        """
        Upload an object from an in-memory buffer.

        Args:
            request: Upload parameters and data

        Returns:
            UploadResponse: Result of the upload

        Raises:
            InvalidTargetError: If bucket or key is unusable
            HTTPError: If the server rejects the upload
            NetworkError: If the upload cannot be delivered
        """
        content_length = request.content_length
        if content_length is None:
            content_length = len(request.data)

        signed = self._sign(request, content_length)
        return await self.executor.execute(signed, RequestBody.from_bytes(request.data))

    async def upload_file(self, request: UploadFileRequest) -> UploadResponse:
        """
        Upload an object from a local file.

        The file is checked before anything is sent and its contents are
        streamed, never fully loaded into memory.

        Raises:
            FileAccessError: If the file is missing, not a regular file or unreadable
            InvalidTargetError: If bucket or key is unusable
            HTTPError: If the server rejects the upload
            NetworkError: If the upload cannot be delivered
        """
        path = request.file_path
        try:
            file_stat = os.stat(path)
            if not stat.S_ISREG(file_stat.st_mode):
                raise IsADirectoryError(f"Not a regular file: {path}")
            if not os.access(path, os.R_OK):
                raise PermissionError(f"File is not readable: {path}")
        except OSError as e:
            raise FileAccessError(path, e)

        content_length = request.content_length
        if content_length is None:
            content_length = file_stat.st_size

        signed = self._sign(request, content_length)
        return await self.executor.execute(signed, RequestBody.from_file(path))

    def build_url(self, bucket_name: str, object_key: str, query_params=None) -> str:
        """
        Build the virtual-hosted style URL of an object.

        Raises:
            InvalidTargetError: If bucket or key is empty
        """
        if not bucket_name or not object_key:
            raise InvalidTargetError(
                f"{self.configuration.scheme}://{bucket_name}.{self.configuration.endpoint}/{object_key}"
            )

        url = (
            f"{self.configuration.scheme}://{bucket_name}.{self.configuration.endpoint}/"
            f"{encode_object_key(object_key)}"
        )
        if query_params:
            url += "?" + encode_query_items(query_params)
        return url

    def _sign(self, request: UploadRequest, content_length: int) -> SignedRequest:
        context = SigningContext(
            method=HttpMethod.PUT,
            url=self.build_url(request.bucket_name, request.object_key, request.query_params),
            bucket_name=request.bucket_name,
            object_key=request.object_key,
            date=request.date,
            content_type=request.content_type or DEFAULT_CONTENT_TYPE,
            content_md5=request.content_md5,
            content_length=content_length,
            metadata=dict(request.metadata),
            acl=request.acl,
            storage_class=request.storage_class,
            server_side_encryption=request.server_side_encryption,
        )
        signed = self.signer.sign(context)
        signed.headers["Content-Length"] = str(content_length)
        return signed

    async def close(self) -> None:
        """Close the transport if this client created it"""
        if self._owns_transport:
            await self.executor.transport.aclose()
