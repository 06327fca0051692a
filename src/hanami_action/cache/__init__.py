"""HTTP caching support: directives, header builders and conditional GET."""

from hanami_action.cache.cache_control import CACHE_CONTROL, EXPIRES, CacheControl, Expires
from hanami_action.cache.conditional_get import ConditionalGet, ETag, LastModified
from hanami_action.cache.directives import (
    NON_VALUE_DIRECTIVES,
    VALUE_DIRECTIVES,
    Directives,
    NonValueDirective,
    ValueDirective,
)

__all__ = [
    "CACHE_CONTROL",
    "EXPIRES",
    "NON_VALUE_DIRECTIVES",
    "VALUE_DIRECTIVES",
    "CacheControl",
    "ConditionalGet",
    "Directives",
    "ETag",
    "Expires",
    "LastModified",
    "NonValueDirective",
    "ValueDirective",
]
