"""
Retrying request executor

This module delivers signed requests through a Transport, classifies every
outcome as success, transient failure or fatal failure, and retries
transient failures with exponential backoff.
"""

import asyncio
import logging
import socket
import ssl
from typing import Awaitable, Callable, Optional

import httpx
import requests

from ..exceptions import (
    OBSError,
    HTTPError,
    InternalError,
    InvalidConfigurationError,
    NetworkError,
    UnknownError,
)
from ..models import BodyKind, RequestBody, UploadResponse
from ..signing.types import SignedRequest
from ..xml_errors import parse_error_response
from .transport import Transport, TransportResponse

logger = logging.getLogger(__name__)

# Transport failures worth another attempt: timeouts, host resolution
# failures, refused connections and connections dropped mid-flight.
RETRYABLE_EXCEPTIONS = (
    httpx.TimeoutException,
    httpx.ConnectError,
    httpx.RemoteProtocolError,
    httpx.ReadError,
    httpx.WriteError,
    requests.exceptions.ConnectTimeout,
    requests.exceptions.ConnectionError,
    socket.gaierror,
    ConnectionError,
    TimeoutError,
)

# Subclasses of retryable exceptions that never succeed on a retry:
# TLS handshake and certificate failures, and proxy failures.
FATAL_EXCEPTIONS = (
    requests.exceptions.SSLError,
    requests.exceptions.ProxyError,
    ssl.SSLError,
)

RetryPredicate = Callable[[BaseException], bool]
SleepFunction = Callable[[float], Awaitable[None]]


def _chained_errors(error: BaseException):
    seen = set()
    current: Optional[BaseException] = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def is_retryable_transport_error(error: BaseException) -> bool:
    """
    Default classification of transport exceptions.

    An exception is retryable if it is one of RETRYABLE_EXCEPTIONS and
    neither it nor anything it was raised from is one of FATAL_EXCEPTIONS
    (httpx reports certificate failures as ConnectError chained from an
    ssl.SSLError).

    Args:
        error: Exception raised by a transport

    Returns:
        bool: True if the request should be attempted again
    """
    if not isinstance(error, RETRYABLE_EXCEPTIONS):
        return False
    return not any(isinstance(e, FATAL_EXCEPTIONS) for e in _chained_errors(error))


def backoff_delay(attempt: int, base_delay: float = 1.0) -> float:
    """Delay after a failed attempt: base_delay * 2 ** attempt (1, 2, 4, 8...)"""
    return base_delay * (2 ** attempt)


class RetryingExecutor:
    """
    Executor delivering signed requests with bounded retries.

    A request is attempted at most ``max_retry_count + 1`` times. 5xx
    responses and transport failures accepted by ``is_retryable`` are
    retried; any other non-2xx status or transport failure is raised on
    first occurrence. The executor keeps no per-request state on the
    instance, so one executor serves concurrent uploads.
    """

    def __init__(
        self,
        transport: Transport,
        max_retry_count: int = 3,
        is_retryable: Optional[RetryPredicate] = None,
        base_delay: float = 1.0,
        sleep: Optional[SleepFunction] = None
    ):
        """
        Initialize the executor.

        Args:
            transport: Transport used to send requests
            max_retry_count: Number of retries after the first attempt
            is_retryable: Predicate classifying transport exceptions as transient
            base_delay: Backoff time unit in seconds
            sleep: Coroutine function used for backoff delays
        """
        if max_retry_count < 0:
            raise InvalidConfigurationError("max_retry_count must be non-negative")
        if base_delay < 0:
            raise InvalidConfigurationError("base_delay must be non-negative")

        self.transport = transport
        self.max_retry_count = max_retry_count
        self.is_retryable = is_retryable or is_retryable_transport_error
        self.base_delay = base_delay
        self.sleep = sleep or asyncio.sleep

    async def execute(self, request: SignedRequest, body: Optional[RequestBody] = None) -> UploadResponse:
        """
        Deliver a request and map the successful response.

        Raises:
            HTTPError: On a non-retryable status or after retries on 5xx
            NetworkError: On a fatal or exhausted transport failure
            UnknownError: If the transport returns something other than a response
        """
        response = await self.perform(request, body)
        return UploadResponse.from_response(response)

    async def perform(self, request: SignedRequest, body: Optional[RequestBody] = None) -> TransportResponse:
        """
        Deliver a request, retrying transient failures.

        Args:
            request: Signed request
            body: Request body (no body if None)

        Returns:
            TransportResponse: The first 2xx response
        """
        body = body or RequestBody.empty()
        total_attempts = self.max_retry_count + 1
        last_error: Optional[OBSError] = None

        for attempt in range(total_attempts):
            logger.debug(f"Attempt {attempt + 1} of {total_attempts}: {request.method.value} {request.url}")

            try:
                response = await self._dispatch(request, body)
            except OBSError:
                raise
            except Exception as e:
                if not self.is_retryable(e):
                    logger.error(f"Non-retryable transport error: {e!r}")
                    raise NetworkError(e) from e
                logger.error(f"Network error on attempt {attempt + 1}: {e!r}")
                last_error = NetworkError(e)
            else:
                if not isinstance(response, TransportResponse):
                    raise UnknownError("Received a non-HTTP response")

                if response.is_success:
                    logger.debug(f"Request succeeded with status {response.status_code}")
                    return response

                error = HTTPError(response.status_code, parse_error_response(response.body))
                if not response.is_server_error:
                    logger.error(f"Client error (status {response.status_code}); not retrying")
                    raise error

                logger.error(f"Server error (status {response.status_code}); will retry if attempts remain")
                last_error = error

            if attempt < self.max_retry_count:
                delay = backoff_delay(attempt, self.base_delay)
                logger.info(f"Waiting {delay} seconds before retrying...")
                await self.sleep(delay)

        if last_error is None:
            raise InternalError("Request failed without a recorded error")
        raise last_error

    async def _dispatch(self, request: SignedRequest, body: RequestBody):
        if body.kind == BodyKind.DATA:
            return await self.transport.send_data(request, body.data)
        if body.kind == BodyKind.FILE:
            return await self.transport.send_file(request, body.path)
        return await self.transport.send(request)
