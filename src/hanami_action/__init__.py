"""
Action layer for Python web applications.

This package provides endpoint objects that negotiate the response
format, map exceptions to HTTP statuses, apply caching and conditional
GET headers, and turn a WSGI-style environ into a (status, headers,
body) result.
"""

from hanami_action.cache import CacheControl, ConditionalGet, Directives, Expires
from hanami_action.config import ActionConfig, SecurityConfig
from hanami_action.core.action import Action
from hanami_action.core.exception_mapping import HandlerMapping, StatusMapping
from hanami_action.core.lifecycle import Lifecycle, LifecycleState
from hanami_action.exceptions import (
    ActionError,
    ConfigurationError,
    FormatCoercionError,
    Halt,
    IllegalExposureError,
    MissingSessionError,
    UnknownFormatError,
)
from hanami_action.formats import FormatRegistry, negotiate
from hanami_action.params import Params
from hanami_action.request import Request
from hanami_action.response import ActionResult, Response

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "Action",
    "ActionConfig",
    "ActionError",
    "ActionResult",
    "CacheControl",
    "ConditionalGet",
    "ConfigurationError",
    "Directives",
    "Expires",
    "FormatCoercionError",
    "FormatRegistry",
    "Halt",
    "HandlerMapping",
    "IllegalExposureError",
    "Lifecycle",
    "LifecycleState",
    "MissingSessionError",
    "Params",
    "Request",
    "Response",
    "SecurityConfig",
    "StatusMapping",
    "UnknownFormatError",
    "negotiate",
]
