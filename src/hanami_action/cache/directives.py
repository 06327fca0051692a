"""Typed representation of ``Cache-Control`` directives.

Two closed sets of directive names are recognized:

- value directives (``max_age``, ``s_maxage``, ``min_fresh``, ``max_stale``)
  carry an integer number of seconds
- non-value directives (``public``, ``private``, ``no_cache``, ...) are
  presence-only flags

Anything outside those sets is dropped without error.

Examples:
    >>> Directives("public", max_age=600).join(", ")
    'public, max-age=600'
    >>> Directives("private", "public").join(", ")
    'private'
"""

from collections.abc import Iterator, Mapping
from typing import Any

from hanami_action.utils.headers import dasherize

VALUE_DIRECTIVES = ("max_age", "s_maxage", "min_fresh", "max_stale")

NON_VALUE_DIRECTIVES = (
    "public",
    "private",
    "no_cache",
    "no_store",
    "no_transform",
    "must_revalidate",
    "proxy_revalidate",
)


class ValueDirective:
    """A directive carrying an integer value, e.g. ``max-age=600``."""

    def __init__(self, name: Any, value: Any) -> None:
        self.name = name
        self.value = value

    @property
    def valid(self) -> bool:
        if self.name not in VALUE_DIRECTIVES:
            return False
        try:
            int(self.value)
        except (TypeError, ValueError):
            return False
        return True

    def __str__(self) -> str:
        return f"{dasherize(self.name)}={int(self.value)}"

    def __repr__(self) -> str:
        return f"ValueDirective({self.name!r}, {self.value!r})"


class NonValueDirective:
    """A presence-only directive, e.g. ``no-cache``."""

    def __init__(self, name: Any) -> None:
        self.name = name

    @property
    def valid(self) -> bool:
        return self.name in NON_VALUE_DIRECTIVES

    def __str__(self) -> str:
        return dasherize(self.name)

    def __repr__(self) -> str:
        return f"NonValueDirective({self.name!r})"


Directive = ValueDirective | NonValueDirective


class Directives:
    """Ordered collection of valid cache directives.

    Positional arguments are flag names or mappings of value directive
    names to seconds; keyword arguments are value directives too.

    Args:
        *values: Flag names and/or mappings of value directives
        **value_directives: Value directives as keywords

    Example:
        >>> list(map(str, Directives("no_cache", {"max_age": 0})))
        ['no-cache', 'max-age=0']
    """

    def __init__(self, *values: Any, **value_directives: Any) -> None:
        self._directives: list[Directive] = []

        for value in (*values, value_directives):
            if isinstance(value, Mapping):
                for name, seconds in value.items():
                    self.add(ValueDirective(name, seconds))
            else:
                self.add(NonValueDirective(value))

    def add(self, directive: Directive) -> None:
        """Append a directive if its name is recognized."""
        if directive.valid:
            self._directives.append(directive)

    def values(self) -> list[Directive]:
        """Directives in declaration order, with ``public`` dropped when ``private`` is present."""
        names = {directive.name for directive in self._directives}
        if "private" in names:
            return [d for d in self._directives if d.name != "public"]
        return list(self._directives)

    def names(self) -> list[str]:
        return [directive.name for directive in self.values()]

    def join(self, separator: str = ", ") -> str:
        return separator.join(str(directive) for directive in self.values())

    def __iter__(self) -> Iterator[Directive]:
        return iter(self.values())

    def __len__(self) -> int:
        return len(self.values())

    def __bool__(self) -> bool:
        return len(self) > 0

    def __repr__(self) -> str:
        return f"Directives({self.join()!r})"
