"""
HTTP delivery for the OBS Python SDK

This package provides pluggable transports (httpx and requests based) and
the retrying executor that delivers signed requests through them.
"""

from .transport import (
    Transport,
    TransportResponse,
    HttpxTransport,
    RequestsTransport,
)

from .executor import (
    RetryingExecutor,
    RETRYABLE_EXCEPTIONS,
    FATAL_EXCEPTIONS,
    is_retryable_transport_error,
    backoff_delay,
)

__all__ = [
    # Transports
    'Transport',
    'TransportResponse',
    'HttpxTransport',
    'RequestsTransport',
    # Executor
    'RetryingExecutor',
    'RETRYABLE_EXCEPTIONS',
    'FATAL_EXCEPTIONS',
    'is_retryable_transport_error',
    'backoff_delay',
]
