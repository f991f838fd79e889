"""
Utility functions for request signing

This module provides date formatting, digest helpers, and URL decomposition
used to build the OBS canonical string.
"""

import base64
import hashlib
import hmac
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import List, Optional, Tuple, Union
from urllib.parse import urlsplit, unquote, quote, SplitResult

from ..exceptions import FileAccessError, InvalidTargetError

FILE_CHUNK_SIZE = 64 * 1024

QueryItem = Tuple[str, Optional[str]]


def format_rfc1123_date(value: Optional[datetime] = None) -> str:
    """
    Format a timestamp for the Date header.

    The output is always English and GMT (e.g. ``Sun, 14 Sep 2025 01:25:30 GMT``)
    whatever the process locale is. Naive datetimes are taken as UTC.

    Args:
        value: Timestamp to format (current time if None)

    Returns:
        str: RFC 1123 date string
    """
    if value is None:
        value = datetime.now(timezone.utc)
    elif value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return format_datetime(value.replace(microsecond=0), usegmt=True)


def md5_base64(data: bytes) -> str:
    """Base64-encoded MD5 digest of data"""
    return base64.b64encode(hashlib.md5(data).digest()).decode('ascii')


def md5_base64_file(path: str, chunk_size: int = FILE_CHUNK_SIZE) -> str:
    """
    Base64-encoded MD5 digest of a file, read in chunks.

    Raises:
        FileAccessError: If the file cannot be read
    """
    hasher = hashlib.md5()
    try:
        with open(path, 'rb') as f:
            for chunk in iter(lambda: f.read(chunk_size), b''):
                hasher.update(chunk)
    except OSError as e:
        raise FileAccessError(path, e)
    return base64.b64encode(hasher.digest()).decode('ascii')


def hmac_sha1_base64(key: str, message: str) -> str:
    """Base64-encoded HMAC-SHA1 of the UTF-8 message keyed by the UTF-8 key"""
    digest = hmac.new(key.encode('utf-8'), message.encode('utf-8'), hashlib.sha1).digest()
    return base64.b64encode(digest).decode('ascii')


def split_url(url: str) -> SplitResult:
    """
    Split a request URL into its components.

    Raises:
        InvalidTargetError: If the URL has no scheme or host, or cannot be parsed
    """
    try:
        parts = urlsplit(url)
        # Accessing port validates it
        parts.port
    except ValueError as e:
        raise InvalidTargetError(url, {"original_error": str(e)})

    if not parts.scheme or not parts.hostname:
        raise InvalidTargetError(url)

    return parts


def parse_query_items(query: str) -> List[QueryItem]:
    """
    Parse a raw query string into (name, value) pairs.

    A parameter without ``=`` yields a None value, unlike ``name=`` which
    yields an empty string.
    """
    items: List[QueryItem] = []
    if not query:
        return items

    for part in query.split('&'):
        if not part:
            continue
        name, sep, value = part.partition('=')
        items.append((unquote(name), unquote(value) if sep else None))
    return items


def encode_object_key(key: str) -> str:
    """Percent-encode an object key for use in a URL path"""
    return quote(key, safe="/~")


def encode_query_items(items: Union[dict, List[QueryItem]]) -> str:
    """Render query items, leaving None-valued items bare"""
    if isinstance(items, dict):
        items = list(items.items())
    parts = []
    for name, value in items:
        if value is None:
            parts.append(quote(name, safe=''))
        else:
            parts.append(f"{quote(name, safe='')}={quote(str(value), safe='')}")
    return '&'.join(parts)
