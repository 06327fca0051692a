"""Header manipulation utilities for the action layer.

This module provides functions for:
- Case-insensitive header lookup and merging
- Filtering response headers down to the entity allowlist
- Formatting and parsing HTTP dates
- Mapping header names to WSGI environ keys
"""

from datetime import datetime, timezone
from email.utils import formatdate, parsedate_to_datetime

# Headers kept on responses that must not carry a body
ENTITY_HEADERS = {
    "allow",
    "cache-control",
    "etag",
    "vary",
    "content-encoding",
    "content-language",
    "content-location",
    "content-md5",
    "content-range",
    "expires",
    "last-modified",
    "extension-header",
}


def filter_entity_headers(
    headers: dict[str, str],
    additional_allowed: list[str] | None = None,
) -> dict[str, str]:
    """Keep only entity headers on a bodiless response.

    Args:
        headers: Original response headers
        additional_allowed: Additional header names to keep (case-insensitive)

    Returns:
        Filtered headers dictionary

    Example:
        >>> headers = {
        ...     "Content-Type": "text/html",
        ...     "Content-Length": "42",
        ...     "Last-Modified": "Mon, 01 Oct 2025 12:00:00 GMT",
        ... }
        >>> filter_entity_headers(headers)
        {'Last-Modified': 'Mon, 01 Oct 2025 12:00:00 GMT'}
    """
    allowed = ENTITY_HEADERS.copy()

    if additional_allowed:
        allowed.update(h.lower() for h in additional_allowed)

    return {key: value for key, value in headers.items() if key.lower() in allowed}


def get_header_value(
    headers: dict[str, str],
    header_name: str,
    default: str | None = None,
) -> str | None:
    """Get header value with case-insensitive lookup.

    Args:
        headers: Headers dictionary
        header_name: Name of header to find (case-insensitive)
        default: Default value if header not found

    Returns:
        Header value or default

    Example:
        >>> headers = {"Content-Type": "application/json"}
        >>> get_header_value(headers, "content-type")
        'application/json'
        >>> get_header_value(headers, "missing", "default")
        'default'
    """
    header_name_lower = header_name.lower()

    for key, value in headers.items():
        if key.lower() == header_name_lower:
            return value

    return default


def has_header(headers: dict[str, str], header_name: str) -> bool:
    """Whether a header is present, ignoring case."""
    header_name_lower = header_name.lower()
    return any(key.lower() == header_name_lower for key in headers)


def merge_headers(*header_dicts: dict[str, str]) -> dict[str, str]:
    """Merge multiple header dictionaries with case-insensitive key handling.

    Later dictionaries override earlier ones. Keys from the last dict are used.

    Args:
        *header_dicts: Variable number of header dictionaries to merge

    Returns:
        Merged headers dictionary

    Example:
        >>> h1 = {"Content-Type": "text/html"}
        >>> h2 = {"content-type": "application/json", "X-Custom": "value"}
        >>> merge_headers(h1, h2)
        {'content-type': 'application/json', 'X-Custom': 'value'}
    """
    # Track canonical case for each header (use last seen)
    canonical_keys: dict[str, str] = {}
    result: dict[str, str] = {}

    for headers in header_dicts:
        for key, value in headers.items():
            key_lower = key.lower()

            # Remove old key if exists with different case
            if key_lower in canonical_keys:
                old_key = canonical_keys[key_lower]
                if old_key in result:
                    del result[old_key]

            canonical_keys[key_lower] = key
            result[key] = value

    return result


def environ_key(header_name: str) -> str:
    """Translate a header name into its WSGI environ key.

    Example:
        >>> environ_key("If-None-Match")
        'HTTP_IF_NONE_MATCH'
        >>> environ_key("Content-Type")
        'CONTENT_TYPE'
    """
    key = header_name.upper().replace("-", "_")
    if key in ("CONTENT_TYPE", "CONTENT_LENGTH"):
        return key
    return f"HTTP_{key}"


def dasherize(name: str) -> str:
    """Turn an identifier into its header-token form.

    Example:
        >>> dasherize("no_cache")
        'no-cache'
    """
    return name.replace("_", "-")


def http_date(moment: datetime | float) -> str:
    """Format a datetime or epoch timestamp as an HTTP date.

    Naive datetimes are taken to be UTC.

    Example:
        >>> http_date(0)
        'Thu, 01 Jan 1970 00:00:00 GMT'
    """
    return formatdate(to_timestamp(moment), usegmt=True)


def parse_http_date(value: str | None) -> datetime | None:
    """Parse an HTTP date header, returning None when it is malformed."""
    if not value or not value.strip():
        return None
    try:
        parsed = parsedate_to_datetime(value.strip())
    except (TypeError, ValueError, IndexError, OverflowError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_timestamp(moment: datetime | float) -> float:
    """Seconds since the epoch for a datetime (naive means UTC) or number."""
    if isinstance(moment, datetime):
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        return moment.timestamp()
    return float(moment)


def header_items(headers: dict[str, str]) -> list[tuple[str, str]]:
    """Flatten headers into pairs, splitting newline-joined ``Set-Cookie`` values.

    Example:
        >>> header_items({"Set-Cookie": "a=1\\nb=2", "Vary": "Accept"})
        [('Set-Cookie', 'a=1'), ('Set-Cookie', 'b=2'), ('Vary', 'Accept')]
    """
    items: list[tuple[str, str]] = []
    for name, value in headers.items():
        if name.lower() == "set-cookie":
            items.extend((name, line) for line in str(value).split("\n") if line)
        else:
            items.append((name, str(value)))
    return items
