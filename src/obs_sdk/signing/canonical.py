"""
Canonical string construction for OBS V1 signatures

The canonical string is what actually gets signed, so every function here is
pure: the output depends only on the arguments and the static sub-resource
whitelist.
"""

from typing import Iterable, Mapping, Optional, Tuple

from .types import OBS_HEADER_PREFIX, SUB_RESOURCES
from .utils import QueryItem


def canonical_header_items(headers: Mapping[str, str]) -> Tuple[Tuple[str, str], ...]:
    """
    Select and normalize the headers that take part in the signature.

    Args:
        headers: Request headers

    Returns:
        Sorted (lowercase name, trimmed value) pairs of x-obs-* headers
    """
    items = [
        (name.lower(), str(value).strip())
        for name, value in headers.items()
        if name.lower().startswith(OBS_HEADER_PREFIX)
    ]
    return tuple(sorted(items))


def build_canonical_headers(headers: Mapping[str, str]) -> str:
    """
    Build the CanonicalizedHeaders segment.

    Each header renders as ``name:value`` followed by a newline; no x-obs-*
    headers render as the empty string.
    """
    items = canonical_header_items(headers)
    if not items:
        return ""
    return "\n".join(f"{name}:{value}" for name, value in items) + "\n"


def build_canonical_resource(
    bucket_name: str,
    object_key: str,
    query_items: Iterable[QueryItem] = ()
) -> str:
    """
    Build the CanonicalizedResource segment.

    Args:
        bucket_name: Target bucket
        object_key: Target object key
        query_items: (name, value) pairs from the request URL; a None value
            marks a bare parameter

    Returns:
        str: ``/bucket/key`` plus whitelisted sub-resources sorted by name
    """
    resource = f"/{bucket_name}/{object_key}"

    signed = sorted(
        (item for item in query_items if item[0] in SUB_RESOURCES),
        key=lambda item: (item[0], item[1] is not None, item[1] or "")
    )
    if signed:
        resource += "?" + "&".join(
            name if value is None else f"{name}={value}"
            for name, value in signed
        )
    return resource


def build_string_to_sign(
    method: str,
    date: str,
    canonical_headers: str,
    canonical_resource: str,
    content_md5: Optional[str] = None,
    content_type: Optional[str] = None,
) -> str:
    """
    Assemble the string to sign.

    Returns:
        str: ``VERB\\nMD5\\nTYPE\\nDATE\\n`` followed by the canonical headers
        and resource with no separator between them
    """
    return "\n".join([
        method,
        content_md5 or "",
        content_type or "",
        date,
        canonical_headers + canonical_resource,
    ])
