"""Configuration module for actions.

This module provides the ActionConfig class, the immutable configuration
value every action class carries, and SecurityConfig, the default
security headers applied to responses when enabled.

Each subclass of ``Action`` receives its own copy of its parent's
configuration when it is defined, so changing a child never affects the
parent or its siblings.

Example:
    Basic usage with defaults:

        >>> config = ActionConfig()
        >>> config.handle_exceptions
        True
        >>> config.formats.mime_type_for("all")
        'application/octet-stream'

    Custom configuration:

        >>> config = ActionConfig(
        ...     accepted_formats=["html", "json"],
        ...     default_charset="utf-8",
        ...     handled_exceptions={KeyError: 404},
        ... )
        >>> config.default_format
        'html'

    Loading from environment:

        >>> import os
        >>> os.environ['HANAMI_ACTION_HANDLE_EXCEPTIONS'] = 'false'
        >>> os.environ['HANAMI_ACTION_ACCEPTED_FORMATS'] = 'json,xml'
        >>> config = ActionConfig.from_env()
"""

import copy
import os
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from hanami_action.core.exception_mapping import (
    HandlerMapping,
    StatusMapping,
    coerce_mappings,
)
from hanami_action.formats import FormatRegistry
from hanami_action.utils.headers import dasherize

DEFAULT_CONTENT_SECURITY_POLICY: dict[str, str] = {
    "form_action": "'self'",
    "frame_ancestors": "'self'",
    "base_uri": "'self'",
    "default_src": "'none'",
    "script_src": "'self'",
    "connect_src": "'self'",
    "img_src": "'self' https: data:",
    "style_src": "'self' 'unsafe-inline' https:",
    "font_src": "'self'",
    "object_src": "'none'",
    "plugin_types": "application/pdf",
    "child_src": "'self'",
    "frame_src": "'self'",
    "media_src": "'self'",
}

TRUE_VALUES = {"1", "true", "yes", "on"}


class SecurityConfig(BaseModel):
    """Default security headers.

    Every header can be overridden with a new value or removed by setting
    it to ``None``. ``content_security_policy`` entries are merged over the
    defaults, so a single directive can be changed or removed without
    restating the others.

    Attributes:
        x_frame_options: Value of ``X-Frame-Options``. Default "DENY".
        x_content_type_options: Value of ``X-Content-Type-Options``. Default "nosniff".
        x_xss_protection: Value of ``X-XSS-Protection``. Default "1; mode=block".
        content_security_policy: Directive name to value; ``None`` drops a directive.

    Example:
        >>> security = SecurityConfig(content_security_policy={"script_src": "'self' https:"})
        >>> security.to_headers()["X-Frame-Options"]
        'DENY'
    """

    x_frame_options: str | None = "DENY"
    x_content_type_options: str | None = "nosniff"
    x_xss_protection: str | None = "1; mode=block"
    content_security_policy: dict[str, str | None] = Field(
        default_factory=lambda: dict(DEFAULT_CONTENT_SECURITY_POLICY),
        description="Content-Security-Policy directives",
    )

    model_config = {"frozen": True}

    @field_validator("content_security_policy", mode="before")
    @classmethod
    def merge_content_security_policy(cls, v: Any) -> dict[str, str | None]:
        """Merge the given directives over the defaults.

        Passing ``None`` for the whole policy removes the header.
        """
        if v is None:
            return {name: None for name in DEFAULT_CONTENT_SECURITY_POLICY}
        if not isinstance(v, dict):
            raise ValueError("content_security_policy must be a dict of directives")
        return {**DEFAULT_CONTENT_SECURITY_POLICY, **v}

    def content_security_policy_header(self) -> str | None:
        directives = [
            f"{dasherize(name)} {value}"
            for name, value in self.content_security_policy.items()
            if value is not None
        ]
        return "; ".join(directives) or None

    def to_headers(self) -> dict[str, str]:
        headers = {
            "X-Frame-Options": self.x_frame_options,
            "X-Content-Type-Options": self.x_content_type_options,
            "X-XSS-Protection": self.x_xss_protection,
            "Content-Security-Policy": self.content_security_policy_header(),
        }
        return {name: value for name, value in headers.items() if value is not None}


class ActionConfig(BaseModel):
    """Configuration for an action class.

    This immutable configuration defines how an action negotiates formats,
    which headers it sends by default and how it turns exceptions into
    responses.

    Attributes:
        formats: Registry of format names and MIME types, plus the accepted
            and default formats. Defaults to the built-in mapping and the
            well-known MIME table.
        default_charset: Charset appended to the negotiated Content-Type.
            Default is None (no charset parameter).
        default_headers: Headers added to every response. ``None`` values
            are dropped.
        handled_exceptions: Exception class to ``StatusMapping`` or
            ``HandlerMapping``. Ints and callables are coerced.
        handle_exceptions: Whether handler exceptions are converted into
            responses. When False they propagate to the caller. Default True.
        security: Security headers to send, or None to disable them.
            ``True`` selects the defaults.
        sessions_enabled: Whether session, flash and request session access
            are available. Default False.
        cookies: Default options merged into every cookie that is set.
        public_directory: Directory for static files.
        before_callbacks: Callables (or names of action methods) run
            before the handler.
        after_callbacks: Callables (or names of action methods) run
            after the handler.

    The model also accepts ``accepted_formats`` and ``default_format`` at
    construction time; they are applied to ``formats``.

    Note:
        This class is immutable (frozen=True). Use ``inherit`` to derive a
        changed copy.
    """

    formats: FormatRegistry = Field(
        default_factory=FormatRegistry.standard,
        description="Format registry with accepted and default formats",
    )
    default_charset: str | None = Field(
        default=None,
        description="Charset appended to the response Content-Type",
    )
    default_headers: dict[str, str] = Field(
        default_factory=dict,
        description="Headers added to every response",
    )
    handled_exceptions: dict[type[BaseException], StatusMapping | HandlerMapping] = Field(
        default_factory=dict,
        description="Exception class to status code or handler",
    )
    handle_exceptions: bool = Field(
        default=True,
        description="Whether handler exceptions are converted into responses",
    )
    security: SecurityConfig | None = Field(
        default=None,
        description="Security headers, or None when disabled",
    )
    sessions_enabled: bool = Field(
        default=False,
        description="Whether session-backed features are available",
    )
    cookies: dict[str, Any] = Field(
        default_factory=dict,
        description="Default cookie options",
    )
    public_directory: str = Field(
        default="public",
        description="Directory for static files",
    )
    before_callbacks: tuple[Callable[..., Any] | str, ...] = Field(
        default=(),
        description="Callables run before the handler",
    )
    after_callbacks: tuple[Callable[..., Any] | str, ...] = Field(
        default=(),
        description="Callables run after the handler",
    )

    model_config = {"frozen": True, "arbitrary_types_allowed": True, "extra": "forbid"}

    @model_validator(mode="before")
    @classmethod
    def build_format_registry(cls, data: Any) -> Any:
        """Apply ``accepted_formats`` and ``default_format`` to a copy of ``formats``.

        Raises:
            FormatCoercionError: If a format name cannot be coerced.
        """
        if not isinstance(data, dict):
            return data

        data = dict(data)
        accepted = data.pop("accepted_formats", None)
        default = data.pop("default_format", None)

        formats = data.get("formats")
        if formats is None:
            registry = FormatRegistry.standard()
        elif isinstance(formats, FormatRegistry):
            registry = formats.copy()
        elif isinstance(formats, dict):
            registry = FormatRegistry.standard()
            for name, mime_types in formats.items():
                registry.register(name, mime_types)
        else:
            raise ValueError("formats must be a FormatRegistry or a dict of format to MIME types")

        if isinstance(accepted, str):
            accepted = [name.strip() for name in accepted.split(",") if name.strip()]
        if accepted:
            registry.accept(*accepted)
        if default is not None:
            registry.set_default(default)

        data["formats"] = registry
        return data

    @field_validator("default_headers", mode="before")
    @classmethod
    def compact_default_headers(cls, v: Any) -> dict[str, str]:
        if v is None:
            return {}
        if not isinstance(v, dict):
            raise ValueError("default_headers must be a dict")
        return {str(name): str(value) for name, value in v.items() if value is not None}

    @field_validator("cookies", mode="before")
    @classmethod
    def compact_cookies(cls, v: Any) -> dict[str, Any]:
        if v is None:
            return {}
        if not isinstance(v, dict):
            raise ValueError("cookies must be a dict")
        return {name: value for name, value in v.items() if value is not None}

    @field_validator("handled_exceptions", mode="before")
    @classmethod
    def validate_handled_exceptions(cls, v: Any) -> dict[type[BaseException], Any]:
        """Coerce status codes and callables into exception mappings.

        Example:
            >>> config = ActionConfig(handled_exceptions={KeyError: 404})
            >>> config.handled_exceptions[KeyError].status
            404
        """
        if v is None:
            return {}
        if not isinstance(v, dict):
            raise ValueError("handled_exceptions must be a dict")
        return coerce_mappings(v)

    @field_validator("security", mode="before")
    @classmethod
    def validate_security(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip().lower() in TRUE_VALUES
        if v is True:
            return SecurityConfig()
        if v is False:
            return None
        return v

    @field_validator("before_callbacks", "after_callbacks", mode="before")
    @classmethod
    def validate_callbacks(cls, v: Any) -> tuple[Callable[..., Any] | str, ...]:
        if v is None:
            return ()
        if callable(v) or isinstance(v, str):
            v = (v,)
        callbacks = tuple(v)
        for callback in callbacks:
            if not (callable(callback) or isinstance(callback, str)):
                raise ValueError(f"Callbacks must be callables or method names, got {callback!r}")
        return callbacks

    @property
    def accepted_formats(self) -> list[str]:
        return list(self.formats.accepted)

    @property
    def default_format(self) -> str | None:
        return self.formats.default

    def inherit(self, **overrides: Any) -> "ActionConfig":
        """Derive an independent copy with the given fields changed.

        Mutable parts (format registry, header and exception dicts) are
        copied, so the result shares no state with this instance.

        Args:
            **overrides: Field values, plus ``accepted_formats`` and
                ``default_format``.

        Returns:
            A new ActionConfig.

        Example:
            >>> parent = ActionConfig()
            >>> child = parent.inherit(handle_exceptions=False)
            >>> parent.handle_exceptions, child.handle_exceptions
            (True, False)
        """
        data: dict[str, Any] = {name: getattr(self, name) for name in type(self).model_fields}
        data["formats"] = self.formats.copy()
        data["default_headers"] = dict(self.default_headers)
        data["handled_exceptions"] = dict(self.handled_exceptions)
        data["cookies"] = copy.deepcopy(self.cookies)
        data.update(overrides)
        return type(self)(**data)

    @classmethod
    def from_env(cls, prefix: str = "HANAMI_ACTION_") -> "ActionConfig":
        """Create configuration from environment variables.

        Variable names are the uppercase option names with the prefix:
        ``ACCEPTED_FORMATS`` (comma-separated), ``DEFAULT_FORMAT``,
        ``DEFAULT_CHARSET``, ``HANDLE_EXCEPTIONS``, ``SECURITY``,
        ``SESSIONS_ENABLED`` and ``PUBLIC_DIRECTORY``.

        Args:
            prefix: Prefix for environment variable names.

        Returns:
            ActionConfig populated from the environment.

        Note:
            Missing variables keep their default values.
        """
        config_dict: dict[str, Any] = {}

        options = [
            "accepted_formats",
            "default_format",
            "default_charset",
            "handle_exceptions",
            "security",
            "sessions_enabled",
            "public_directory",
        ]

        for option in options:
            env_value = os.environ.get(f"{prefix}{option.upper()}")
            if env_value is not None:
                config_dict[option] = env_value

        return cls(**config_dict)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "ActionConfig":
        """Create configuration from a dictionary.

        Raises:
            ValidationError: If the dictionary contains invalid values.
        """
        return cls(**config_dict)
