"""Flash messages kept in the session for exactly one subsequent request."""

from collections.abc import Iterator
from typing import Any

FLASH_KEY = "_flash"


class Flash:
    """Messages readable now, plus messages stored for the next request.

    Reading (``flash["notice"]``) sees the messages set by the previous
    request. Writing (``flash["notice"] = "Saved"``) stores a message for
    the next one.

    Example:
        >>> flash = Flash({"notice": "Saved"})
        >>> flash["notice"]
        'Saved'
        >>> flash["alert"] = "Oops"
        >>> flash.next
        {'alert': 'Oops'}
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._now: dict[str, Any] = dict(data or {})
        self.next: dict[str, Any] = {}

    @property
    def now(self) -> dict[str, Any]:
        return self._now

    def to_dict(self) -> dict[str, Any]:
        return dict(self._now)

    def __getitem__(self, key: str) -> Any:
        return self._now.get(key)

    def __setitem__(self, key: str, value: Any) -> None:
        self.next[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        return self._now.get(key, default)

    def __contains__(self, key: object) -> bool:
        return key in self._now

    def __iter__(self) -> Iterator[str]:
        return iter(self._now)

    def __len__(self) -> int:
        return len(self._now)

    @property
    def empty(self) -> bool:
        return not self._now

    def discard(self, key: str | None = None) -> None:
        """Drop one (or every) message stored for the next request."""
        if key is None:
            self.next.clear()
        else:
            self.next.pop(key, None)

    def keep(self, key: str | None = None) -> None:
        """Carry current messages over to the next request."""
        if key is None:
            self.next.update(self._now)
        elif key in self._now:
            self.next[key] = self._now[key]

    def sweep(self) -> "Flash":
        """Promote next-request messages to current ones."""
        self._now = dict(self.next)
        self.next.clear()
        return self
