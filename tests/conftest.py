"""
Shared fixtures for OBS SDK tests
"""

from datetime import datetime, timezone

import pytest

from obs_sdk.credentials import Credentials, CredentialStore
from obs_sdk.http_clients import TransportResponse

BUCKET = "test-bucket"
OBJECT_KEY = "test-object.txt"
ENDPOINT = "obs.cn-north-4.myhuaweicloud.com"
FIXED_DATE = datetime(2025, 9, 14, 1, 25, 30, tzinfo=timezone.utc)
FIXED_DATE_STRING = "Sun, 14 Sep 2025 01:25:30 GMT"

FORBIDDEN_XML = (
    b'<?xml version="1.0" encoding="UTF-8"?>'
    b'<Error><Code>AccessDenied</Code><Message>Access Denied</Message>'
    b'<RequestId>0000018A2B3C4D5E</RequestId><HostId>host-id-value</HostId></Error>'
)


class StubTransport:
    """
    Transport double returning queued outcomes.

    Each queued outcome is either returned (responses or any other object)
    or raised (exception instances). Calls are recorded as
    (operation, request, payload) tuples.
    """

    def __init__(self, outcomes=None):
        self.outcomes = list(outcomes or [])
        self.calls = []
        self.closed = False

    def queue(self, *outcomes):
        self.outcomes.extend(outcomes)

    async def _next(self, operation, request, payload=None):
        self.calls.append((operation, request, payload))
        if not self.outcomes:
            raise AssertionError("StubTransport has no outcome queued")
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def send(self, request):
        return await self._next("send", request)

    async def send_data(self, request, data):
        return await self._next("send_data", request, data)

    async def send_file(self, request, path):
        return await self._next("send_file", request, path)

    async def aclose(self):
        self.closed = True


def success_response(etag='"success-etag"', **extra_headers):
    headers = {
        "ETag": etag,
        "x-obs-version-id": "xyz-789",
        "x-obs-storage-class": "STANDARD",
    }
    headers.update(extra_headers)
    return TransportResponse(status_code=200, headers=headers)


def error_response(status_code, body=b""):
    return TransportResponse(status_code=status_code, headers={"Content-Type": "application/xml"}, body=body)


@pytest.fixture
def permanent_credentials():
    return Credentials.permanent("AKPERMANENT", "permanent-secret-key")


@pytest.fixture
def temporary_credentials():
    return Credentials.temporary("AKTEMPORARY", "temporary-secret-key", "session-token-value")


@pytest.fixture
def credential_store(permanent_credentials):
    return CredentialStore(permanent_credentials)


@pytest.fixture
def stub_transport():
    return StubTransport()


@pytest.fixture
def recorded_sleep():
    """Sleep replacement recording requested delays without waiting"""
    delays = []

    async def sleep(delay):
        delays.append(delay)

    sleep.delays = delays
    return sleep
