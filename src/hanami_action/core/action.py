"""Base class for actions.

An action handles one kind of request. Subclasses implement
``handle(request, response)`` and declare their configuration as class
keyword arguments or through classmethods. Every subclass gets its own
copy of the parent's configuration when it is defined, so declarations
on a child never leak into the parent or its siblings.

Examples:
    A JSON action::

        class Show(Action, accepted_formats=["json"], handled_exceptions={KeyError: 404}):
            def handle(self, request, response):
                book = BOOKS[request.params["id"]]
                response.body = json.dumps(book)

        Show.cache_control("public", max_age=600)

        status, headers, body = Show()(environ)

    Callbacks by method name::

        class Dashboard(Action, before=["authenticate"]):
            def authenticate(self, request, response):
                if "user_id" not in request.session:
                    response.redirect_to("/login")
"""

from collections.abc import Callable, Iterable
from typing import Any, ClassVar

from pydantic import BaseModel

from hanami_action.cache.cache_control import CacheControl, Expires
from hanami_action.config import ActionConfig
from hanami_action.core.exception_mapping import coerce_mappings
from hanami_action.core.lifecycle import Lifecycle
from hanami_action.exceptions import Halt, IllegalExposureError
from hanami_action.request import Request
from hanami_action.response import ActionResult, Response

# Names that cannot be exposed
RESERVED_EXPOSURES = frozenset(
    [
        "body",
        "config",
        "cookies",
        "errors",
        "exposures",
        "flash",
        "format",
        "halt",
        "handle",
        "headers",
        "params",
        "redirect_to",
        "request",
        "response",
        "session",
        "status",
    ]
)

Callback = Callable[..., Any] | str


class Action:
    """An HTTP endpoint.

    Attributes:
        config: Immutable configuration of this class
        exposures: Names always present in the response exposures
        params_model: Optional pydantic model validating the params
    """

    config: ClassVar[ActionConfig] = ActionConfig()
    exposures: ClassVar[tuple[str, ...]] = ()
    params_model: ClassVar[type[BaseModel] | None] = None

    _cache_control: ClassVar[CacheControl | None] = None
    _expires: ClassVar[Expires | None] = None

    def __init_subclass__(
        cls,
        params: type[BaseModel] | None = None,
        before: Iterable[Callback] | None = None,
        after: Iterable[Callback] | None = None,
        **options: Any,
    ) -> None:
        """Give the subclass its own configuration.

        Args:
            params: Pydantic model validating the request params
            before: Callbacks appended to the inherited before chain
            after: Callbacks appended to the inherited after chain
            **options: ``ActionConfig`` fields, plus ``accepted_formats``
                and ``default_format``

        Raises:
            ValidationError: If an option is unknown or invalid.
        """
        super().__init_subclass__()
        cls.config = cls.config.inherit(**options)
        if params is not None:
            cls.params_model = params
        if before:
            cls.append_before(*before)
        if after:
            cls.append_after(*after)

    # Configuration

    @classmethod
    def configure(cls, **options: Any) -> None:
        cls.config = cls.config.inherit(**options)

    @classmethod
    def accept(cls, *formats: str) -> None:
        """Restrict the formats this action responds with.

        Example:
            >>> class Show(Action):
            ...     pass
            >>> Show.accept("html", "json")
            >>> Show.config.accepted_formats
            ['html', 'json']
        """
        cls.config = cls.config.inherit(accepted_formats=list(formats))

    @classmethod
    def register_format(cls, format: str, mime_types: str | Iterable[str]) -> None:
        registry = cls.config.formats.copy()
        registry.register(format, mime_types)
        cls.config = cls.config.inherit(formats=registry)

    @classmethod
    def handle_exception(cls, mappings: dict[type[BaseException], Any]) -> None:
        """Map exception classes to status codes or handlers.

        Args:
            mappings: Exception class to an int status or a callable. A
                callable receives the trailing arguments it accepts of
                ``(action, request, response, exception)``.

        Example:
            >>> class Show(Action):
            ...     pass
            >>> Show.handle_exception({LookupError: 404})
            >>> Show.config.handled_exceptions[LookupError].status
            404
        """
        merged = {**cls.config.handled_exceptions, **coerce_mappings(mappings)}
        cls.config = cls.config.inherit(handled_exceptions=merged)

    # Caching

    @classmethod
    def cache_control(cls, *values: Any, **value_directives: Any) -> None:
        """Send ``Cache-Control`` unless the response sets its own.

        Only the first declaration on a class takes effect. Declarations
        are not inherited by subclasses.
        """
        if "_cache_control" not in cls.__dict__:
            cls._cache_control = CacheControl(*values, **value_directives)

    @classmethod
    def expires(cls, amount: int, *values: Any, **value_directives: Any) -> None:
        """Send ``Expires`` (and its ``Cache-Control``) unless already set."""
        if "_expires" not in cls.__dict__:
            cls._expires = Expires(amount, *values, **value_directives)

    @classmethod
    def cache_control_builder(cls) -> CacheControl | None:
        return cls.__dict__.get("_cache_control")

    @classmethod
    def expires_builder(cls) -> Expires | None:
        return cls.__dict__.get("_expires")

    # Exposures

    @classmethod
    def expose(cls, *names: str) -> None:
        """Declare names that always appear in the response exposures.

        Raises:
            IllegalExposureError: If a name is reserved.
        """
        for name in names:
            if name in RESERVED_EXPOSURES:
                raise IllegalExposureError(name)
        cls.exposures = tuple(dict.fromkeys([*cls.exposures, *names]))

    # Callbacks

    @classmethod
    def append_before(cls, *callbacks: Callback) -> None:
        cls.config = cls.config.inherit(
            before_callbacks=(*cls.config.before_callbacks, *callbacks)
        )

    @classmethod
    def prepend_before(cls, *callbacks: Callback) -> None:
        cls.config = cls.config.inherit(
            before_callbacks=(*callbacks, *cls.config.before_callbacks)
        )

    @classmethod
    def append_after(cls, *callbacks: Callback) -> None:
        cls.config = cls.config.inherit(
            after_callbacks=(*cls.config.after_callbacks, *callbacks)
        )

    @classmethod
    def prepend_after(cls, *callbacks: Callback) -> None:
        cls.config = cls.config.inherit(
            after_callbacks=(*callbacks, *cls.config.after_callbacks)
        )

    @classmethod
    def before(cls, callback: Callback) -> Callback:
        """Append a before callback; usable as a decorator.

        Example::

            @Show.before
            def authenticate(request, response):
                ...
        """
        cls.append_before(callback)
        return callback

    @classmethod
    def after(cls, callback: Callback) -> Callback:
        """Append an after callback; usable as a decorator."""
        cls.append_after(callback)
        return callback

    # Calling

    @property
    def name(self) -> str:
        return type(self).__qualname__

    def handle(self, request: Request, response: Response) -> None:
        """Compute the response. Subclasses override this."""

    def halt(self, status: int, body: Any = None) -> None:
        raise Halt(status, body)

    def call(self, environ: dict[str, Any]) -> Response:
        """Run the action and return the finalized response."""
        return Lifecycle(self, environ).run()

    def __call__(self, environ: dict[str, Any]) -> ActionResult:
        return self.call(environ).to_result()

    def __repr__(self) -> str:
        return f"<{self.name} formats={self.config.accepted_formats!r}>"
