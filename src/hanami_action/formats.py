"""Format registry and content negotiation.

A *format* is a short symbolic name (``"html"``, ``"json"``) standing in
for one or more MIME types. The registry maps MIME types to formats
(many-to-one), tracks which formats an action accepts and which one it
falls back to, and drives ``Accept`` header negotiation.

Examples:
    Registering and looking up formats::

        >>> registry = FormatRegistry()
        >>> registry.register("json", ["application/json", "text/json"])
        >>> registry.format_for("text/json")
        'json'
        >>> registry.mime_type_for("json")
        'application/json'

    Negotiating a request::

        >>> registry.accept("json")
        >>> negotiate(registry, "text/html;q=0.5, application/json")
        ('json', 'application/json')
"""

import math
from collections.abc import Iterable
from typing import Any, NamedTuple

from hanami_action.exceptions import FormatCoercionError, UnknownFormatError

CATCH_ALL_FORMAT = "all"
DEFAULT_CONTENT_TYPE = "application/octet-stream"

# Built-in mapping restored by FormatRegistry.clear()
DEFAULT_MAPPING: dict[str, str] = {
    "application/octet-stream": CATCH_ALL_FORMAT,
    "*/*": CATCH_ALL_FORMAT,
}

# Well-known formats registered on the default action configuration
MIME_TYPES: dict[str, str] = {
    "txt": "text/plain",
    "html": "text/html",
    "json": "application/json",
    "manifest": "text/cache-manifest",
    "atom": "application/atom+xml",
    "avi": "video/x-msvideo",
    "bmp": "image/bmp",
    "bz": "application/x-bzip",
    "bz2": "application/x-bzip2",
    "chm": "application/vnd.ms-htmlhelp",
    "css": "text/css",
    "csv": "text/csv",
    "flv": "video/x-flv",
    "gif": "image/gif",
    "gz": "application/x-gzip",
    "h264": "video/h264",
    "ico": "image/vnd.microsoft.icon",
    "ics": "text/calendar",
    "jpg": "image/jpeg",
    "js": "application/javascript",
    "mp4": "video/mp4",
    "mov": "video/quicktime",
    "mp3": "audio/mpeg",
    "mp4a": "audio/mp4",
    "mpg": "video/mpeg",
    "oga": "audio/ogg",
    "ogg": "application/ogg",
    "ogv": "video/ogg",
    "pdf": "application/pdf",
    "pgp": "application/pgp-encrypted",
    "png": "image/png",
    "psd": "image/vnd.adobe.photoshop",
    "rss": "application/rss+xml",
    "rtf": "application/rtf",
    "sh": "application/x-sh",
    "svg": "image/svg+xml",
    "swf": "application/x-shockwave-flash",
    "tar": "application/x-tar",
    "torrent": "application/x-bittorrent",
    "tsv": "text/tab-separated-values",
    "uri": "text/uri-list",
    "vcs": "text/x-vcalendar",
    "wav": "audio/x-wav",
    "webm": "video/webm",
    "wmv": "video/x-ms-wmv",
    "woff": "application/font-woff",
    "woff2": "application/font-woff2",
    "wsdl": "application/wsdl+xml",
    "xhtml": "application/xhtml+xml",
    "xml": "application/xml",
    "xslt": "application/xslt+xml",
    "yml": "text/yaml",
    "zip": "application/zip",
}


def coerce_format(value: Any) -> str:
    """Coerce a format name, rejecting anything that is not a plain name.

    Raises:
        FormatCoercionError: If the value is not a non-empty string without "/".
    """
    if not isinstance(value, str):
        raise FormatCoercionError(
            f"Format must be a string, got {type(value).__name__}: {value!r}", value
        )
    name = value.strip()
    if not name or "/" in name:
        raise FormatCoercionError(f"Invalid format name: {value!r}", value)
    return name


def coerce_mime_type(value: Any) -> str:
    """Coerce a MIME type string of the form ``type/subtype``.

    Raises:
        FormatCoercionError: If the value is not a string containing "/".
    """
    if not isinstance(value, str):
        raise FormatCoercionError(
            f"MIME type must be a string, got {type(value).__name__}: {value!r}", value
        )
    mime_type = value.strip()
    main, _, sub = mime_type.partition("/")
    if not main or not sub:
        raise FormatCoercionError(f"Invalid MIME type: {value!r}", value)
    return mime_type


class FormatRegistry:
    """Bidirectional mapping between MIME types and format names.

    The newest registration for a given MIME type supersedes older ones.
    Reverse lookups return MIME types in registration order.

    Attributes:
        accepted: Formats the action accepts, in declaration order
        default: Format used when negotiation finds no match
    """

    def __init__(
        self,
        mapping: dict[str, str] | None = None,
        accepted: Iterable[str] = (),
        default: str | None = None,
    ) -> None:
        self._mapping: dict[str, str] = dict(DEFAULT_MAPPING if mapping is None else mapping)
        self.accepted: list[str] = []
        self.default: str | None = None
        if default is not None:
            self.set_default(default)
        self.accept(*accepted)

    @classmethod
    def standard(cls) -> "FormatRegistry":
        """Registry with the built-in mapping plus the well-known MIME table."""
        registry = cls()
        for format, mime_type in MIME_TYPES.items():
            registry.register(format, mime_type)
        return registry

    def register(self, format: str, mime_types: str | Iterable[str]) -> None:
        """Associate one or more MIME types with a format.

        Raises:
            FormatCoercionError: If the format or any MIME type is malformed.
        """
        name = coerce_format(format)
        if isinstance(mime_types, str):
            mime_types = [mime_types]
        coerced = [coerce_mime_type(mime_type) for mime_type in mime_types]
        for mime_type in coerced:
            self._mapping[mime_type] = name

    def format_for(self, mime_type: str | None) -> str | None:
        if mime_type is None:
            return None
        return self._mapping.get(mime_type)

    def mime_type_for(self, format: str | None) -> str | None:
        for mime_type, name in self._mapping.items():
            if name == format:
                return mime_type
        return None

    def mime_types_for(self, format: str) -> list[str]:
        return [mime_type for mime_type, name in self._mapping.items() if name == format]

    def accept(self, *formats: str) -> None:
        """Append formats to the accepted list; the first becomes the default."""
        for format in formats:
            name = coerce_format(format)
            if name not in self.accepted:
                self.accepted.append(name)
        if self.default is None and self.accepted:
            self.default = self.accepted[0]

    def set_default(self, format: str | None) -> None:
        self.default = None if format is None else coerce_format(format)

    def accepted_formats(self) -> list[str]:
        """Accepted formats, or every registered format when none were declared."""
        if self.accepted:
            return list(self.accepted)
        return list(dict.fromkeys(self._mapping.values()))

    @property
    def mime_types(self) -> list[str]:
        return list(self._mapping)

    def clear(self) -> None:
        """Reset to the built-in mapping with no accepted or default format."""
        self._mapping = dict(DEFAULT_MAPPING)
        self.accepted = []
        self.default = None

    def copy(self) -> "FormatRegistry":
        return FormatRegistry(self._mapping, self.accepted, self.default)

    def __deepcopy__(self, memo: dict[int, Any]) -> "FormatRegistry":
        return self.copy()

    def __contains__(self, format: object) -> bool:
        return format in self._mapping.values()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FormatRegistry):
            return NotImplemented
        return (
            list(self._mapping.items()) == list(other._mapping.items())
            and self.accepted == other.accepted
            and self.default == other.default
        )

    def __repr__(self) -> str:
        return (
            f"FormatRegistry(formats={len(set(self._mapping.values()))}, "
            f"accepted={self.accepted!r}, default={self.default!r})"
        )


class AcceptEntry(NamedTuple):
    """One media range from an ``Accept`` header."""

    mime_type: str
    quality: float
    index: int

    @property
    def wildcards(self) -> int:
        return self.mime_type.split("/", 1).count("*")


def parse_accept(header: str | None) -> list[AcceptEntry]:
    """Parse an ``Accept`` header into media ranges, best first.

    Ordering is quality descending, then fewer wildcard segments, then
    position in the header. Entries with ``q=0`` are dropped and a
    malformed quality counts as zero.

    Example:
        >>> [e.mime_type for e in parse_accept("*/*;q=0.8, text/html, text/*")]
        ['text/html', 'text/*', '*/*']
    """
    if not header:
        return []

    entries = []
    for index, part in enumerate(header.split(",")):
        mime_type, *params = [piece.strip() for piece in part.split(";")]
        if not mime_type:
            continue

        quality = 1.0
        for param in params:
            key, _, value = param.partition("=")
            if key.strip().lower() == "q":
                try:
                    quality = float(value.strip())
                except ValueError:
                    quality = 0.0
                if not (math.isfinite(quality) and 0 <= quality <= 1):
                    quality = 0.0

        if quality <= 0:
            continue
        entries.append(AcceptEntry(mime_type.lower(), quality, index))

    return sorted(entries, key=lambda e: (-e.quality, e.wildcards, e.index))


def mime_match(available: str, requested: str) -> bool:
    """Whether a concrete MIME type satisfies a (possibly wildcard) media range.

    Example:
        >>> mime_match("text/html", "text/*")
        True
        >>> mime_match("application/json", "text/*")
        False
    """
    requested_type, sep, requested_sub = requested.partition("/")
    if not sep:
        return False
    available_type, _, available_sub = available.lower().partition("/")
    if requested_type != "*" and requested_type != available_type:
        return False
    return requested_sub == "*" or requested_sub == available_sub


def negotiate(registry: FormatRegistry, accept_header: str | None) -> tuple[str, str]:
    """Pick the response format and MIME type for an ``Accept`` header.

    Candidates are tried best first: an exact registry match to an
    accepted format wins, then a wildcard match against the accepted
    MIME types. Without a match the default format is used, and without
    a default the catch-all format.

    Raises:
        UnknownFormatError: If the configured default has no MIME type.
    """
    accepted = registry.accepted_formats()
    accepted_mime_types = [
        mime_type
        for format in accepted
        for mime_type in registry.mime_types_for(format)
        if "*" not in mime_type
    ]

    for entry in parse_accept(accept_header):
        format = registry.format_for(entry.mime_type)
        if format is not None and format in accepted:
            return format, concrete_mime_type(registry, format, entry.mime_type)

        for mime_type in accepted_mime_types:
            if mime_match(mime_type, entry.mime_type):
                return registry.format_for(mime_type), mime_type  # type: ignore[return-value]

    return default_format(registry)


def default_format(registry: FormatRegistry) -> tuple[str, str]:
    """The configured default format and its MIME type, or the catch-all."""
    if registry.default is not None:
        mime_type = registry.mime_type_for(registry.default)
        if mime_type is None:
            raise UnknownFormatError(registry.default)
        return registry.default, mime_type
    return CATCH_ALL_FORMAT, registry.mime_type_for(CATCH_ALL_FORMAT) or DEFAULT_CONTENT_TYPE


def concrete_mime_type(registry: FormatRegistry, format: str, mime_type: str) -> str:
    """Replace a wildcard media range with the format's first MIME type."""
    if "*" in mime_type:
        return registry.mime_type_for(format) or DEFAULT_CONTENT_TYPE
    return mime_type


def detect_format(content_type: str | None, registry: FormatRegistry) -> str | None:
    """Format name for a ``Content-Type`` value, ignoring its parameters."""
    if not content_type:
        return None
    return registry.format_for(content_type.split(";", 1)[0].strip())


def content_type_with_charset(mime_type: str, charset: str | None) -> str:
    """Append a charset parameter when one is configured.

    Example:
        >>> content_type_with_charset("text/html", "utf-8")
        'text/html; charset=utf-8'
    """
    if charset:
        return f"{mime_type}; charset={charset}"
    return mime_type
