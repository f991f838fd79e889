"""
Extraction of structured error documents from failed responses

OBS reports failures as ``<Error><Code/><Message/><RequestId/><HostId/></Error>``.
Only those four fields are extracted; the document is fed to a pull parser in
chunks and every other element is ignored.
"""

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

PARSE_CHUNK_SIZE = 4096

_FIELDS = {
    "Code": "code",
    "Message": "message",
    "RequestId": "request_id",
    "HostId": "host_id",
}


@dataclass(frozen=True)
class ErrorResponse:
    """
    Structured error returned by the service.

    Attributes:
        code: Error code (e.g. AccessDenied)
        message: Human-readable message
        request_id: Request ID assigned by the server
        host_id: Host ID of the server that handled the request
    """
    code: str = ""
    message: str = ""
    request_id: str = ""
    host_id: str = ""

    def __str__(self) -> str:
        return f"Error {self.code}: {self.message} (RequestID: {self.request_id}, HostID: {self.host_id})"


def _local_name(tag: str) -> str:
    # Drop any "{namespace}" prefix
    return tag.rsplit('}', 1)[-1]


def parse_error_response(data: Optional[bytes]) -> Optional[ErrorResponse]:
    """
    Parse an OBS error document.

    Args:
        data: Raw response body

    Returns:
        ErrorResponse if the body is well-formed XML with a non-empty Code,
        otherwise None
    """
    if not data:
        return None

    parser = ET.XMLPullParser(events=("start", "end"))
    fields = {}

    try:
        for offset in range(0, len(data), PARSE_CHUNK_SIZE):
            parser.feed(data[offset:offset + PARSE_CHUNK_SIZE])
            _collect(parser, fields)
        parser.close()
        _collect(parser, fields)
    except ET.ParseError as e:
        logger.debug(f"Error body is not well-formed XML: {e}")
        return None

    code = fields.get("code", "")
    if not code:
        return None

    return ErrorResponse(
        code=code,
        message=fields.get("message", ""),
        request_id=fields.get("request_id", ""),
        host_id=fields.get("host_id", ""),
    )


def _collect(parser: ET.XMLPullParser, fields: dict) -> None:
    for event, element in parser.read_events():
        name = _FIELDS.get(_local_name(element.tag))
        if name is None:
            continue
        if event == "start":
            fields[name] = ""
        else:
            fields[name] = "".join(element.itertext()).strip()
