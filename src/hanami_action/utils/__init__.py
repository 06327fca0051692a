"""Utility modules for the action layer."""

from .headers import (
    ENTITY_HEADERS,
    filter_entity_headers,
    get_header_value,
    http_date,
    merge_headers,
    parse_http_date,
)
from .status import STATUS_MESSAGES, message_for

__all__ = [
    "ENTITY_HEADERS",
    "STATUS_MESSAGES",
    "filter_entity_headers",
    "get_header_value",
    "http_date",
    "merge_headers",
    "message_for",
    "parse_http_date",
]
