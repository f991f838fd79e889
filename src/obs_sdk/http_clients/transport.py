"""
Pluggable HTTP transports

A transport delivers one signed request and returns the raw response. The
executor never talks to an HTTP library directly, so tests substitute a
transport that returns canned responses.
"""

import asyncio
import functools
import logging
from dataclasses import dataclass, field
from typing import AsyncIterator, Optional, Protocol, runtime_checkable

import httpx
import requests
from requests.structures import CaseInsensitiveDict

from ..exceptions import FileAccessError, ResponseDecodingError
from ..signing.types import SignedRequest
from ..signing.utils import FILE_CHUNK_SIZE

logger = logging.getLogger(__name__)


@dataclass
class TransportResponse:
    """
    Raw HTTP response returned by a transport.

    Attributes:
        status_code: HTTP status code
        headers: Response headers (case-insensitive lookup)
        body: Response body
    """
    status_code: int
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    body: bytes = b""

    def __post_init__(self):
        if not isinstance(self.headers, CaseInsensitiveDict):
            self.headers = CaseInsensitiveDict(self.headers or {})

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def is_server_error(self) -> bool:
        return 500 <= self.status_code < 600


@runtime_checkable
class Transport(Protocol):
    """Protocol for transports used by the retrying executor"""

    async def send(self, request: SignedRequest) -> TransportResponse:
        """Send a request without a body"""
        ...

    async def send_data(self, request: SignedRequest, data: bytes) -> TransportResponse:
        """Send a request with an in-memory body"""
        ...

    async def send_file(self, request: SignedRequest, path: str) -> TransportResponse:
        """Send a request whose body is streamed from a local file"""
        ...


def _open_for_upload(path: str):
    try:
        return open(path, 'rb')
    except OSError as e:
        raise FileAccessError(path, e)


class HttpxTransport:
    """
    Transport backed by ``httpx.AsyncClient``.

    File bodies are streamed in fixed-size chunks; the Content-Length header
    set by the caller keeps the upload from falling back to chunked encoding.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        verify_ssl: bool = True,
        client: Optional[httpx.AsyncClient] = None,
        chunk_size: int = FILE_CHUNK_SIZE
    ):
        self.chunk_size = chunk_size
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout, verify=verify_ssl)

    async def send(self, request: SignedRequest) -> TransportResponse:
        return await self._request(request)

    async def send_data(self, request: SignedRequest, data: bytes) -> TransportResponse:
        return await self._request(request, content=data)

    async def send_file(self, request: SignedRequest, path: str) -> TransportResponse:
        f = _open_for_upload(path)
        try:
            return await self._request(request, content=self._iter_file(f))
        finally:
            f.close()

    async def _iter_file(self, f) -> AsyncIterator[bytes]:
        # Reads run in the default executor to keep the loop free
        loop = asyncio.get_running_loop()
        while True:
            chunk = await loop.run_in_executor(None, f.read, self.chunk_size)
            if not chunk:
                break
            yield chunk

    async def _request(self, request: SignedRequest, **kwargs) -> TransportResponse:
        logger.debug(f"httpx {request.method.value} {request.url}")
        try:
            response = await self.client.request(
                request.method.value,
                request.url,
                headers=request.header_dict(),
                **kwargs
            )
        except httpx.DecodingError as e:
            raise ResponseDecodingError(str(e))
        return TransportResponse(
            status_code=response.status_code,
            headers=CaseInsensitiveDict(response.headers.items()),
            body=response.content,
        )

    async def aclose(self) -> None:
        """Close the underlying client if this transport created it"""
        if self._owns_client:
            await self.client.aclose()
            logger.debug("httpx client closed")


class RequestsTransport:
    """
    Transport backed by a ``requests.Session``.

    Blocking calls run in the event loop's default executor. File bodies are
    opened and closed by the worker thread and handed to requests as open
    file objects, which it streams.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        verify_ssl: bool = True,
        session: Optional[requests.Session] = None
    ):
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self._owns_session = session is None
        self.session = session or requests.Session()

    async def send(self, request: SignedRequest) -> TransportResponse:
        return await self._run(self._request, request, None)

    async def send_data(self, request: SignedRequest, data: bytes) -> TransportResponse:
        return await self._run(self._request, request, data)

    async def send_file(self, request: SignedRequest, path: str) -> TransportResponse:
        return await self._run(self._request_file, request, path)

    async def _run(self, func, request: SignedRequest, payload) -> TransportResponse:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, functools.partial(func, request, payload))

    def _request_file(self, request: SignedRequest, path: str) -> TransportResponse:
        # The file is owned by the worker thread, which may outlive a
        # cancelled caller
        with _open_for_upload(path) as f:
            return self._request(request, f)

    def _request(self, request: SignedRequest, data) -> TransportResponse:
        logger.debug(f"requests {request.method.value} {request.url}")
        try:
            response = self.session.request(
                request.method.value,
                request.url,
                headers=request.header_dict(),
                data=data,
                timeout=self.timeout,
                verify=self.verify_ssl,
            )
        except requests.exceptions.ContentDecodingError as e:
            raise ResponseDecodingError(str(e))
        return TransportResponse(
            status_code=response.status_code,
            headers=CaseInsensitiveDict(response.headers),
            body=response.content,
        )

    async def aclose(self) -> None:
        """Close the underlying session if this transport created it"""
        if self._owns_session:
            self.session.close()
            logger.debug("requests session closed")

