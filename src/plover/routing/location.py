"""In-memory location — how router URLs are written and recorded.

The router never touches a real browser history. ``Location`` formats
paths for the configured mode and keeps the list of visited URLs so
push and replace semantics are observable.

Modes::

    hash     -> "#/blog/7"
    history  -> "/my-root/blog/7"   (root_url prefixed)
    auto     -> same as history
    none     -> "/blog/7"
"""

from plover.config import LOCATION_MODES
from plover.errors import ConfigurationError


class Location:
    """URL formatting and in-memory history for one router."""

    __slots__ = ("_entries", "mode", "root_url")

    def __init__(self, mode: str = "hash", root_url: str = "/") -> None:
        if mode not in LOCATION_MODES:
            msg = (
                f"Unknown location {mode!r}. "
                f"Expected one of: {', '.join(sorted(LOCATION_MODES))}."
            )
            raise ConfigurationError(msg)
        if not root_url.startswith("/"):
            msg = f"root_url must start with '/', got {root_url!r}."
            raise ConfigurationError(msg)
        self.mode = mode
        self.root_url = root_url
        self._entries: list[str] = []

    @property
    def _prefix(self) -> str:
        return self.root_url.rstrip("/")

    def format_url(self, url: str) -> str:
        """Turn a router URL (``/blog/7?page=2``) into the location's form."""
        if self.mode == "hash":
            return f"#{url}"
        if self.mode in ("history", "auto"):
            return f"{self._prefix}{url}"
        return url

    def strip_url(self, url: str) -> str:
        """Inverse of ``format_url``: recover the router URL."""
        if url.startswith("#"):
            url = url[1:]
        elif self.mode in ("history", "auto") and self._prefix:
            if url == self._prefix:
                url = "/"
            elif url.startswith(self._prefix + "/"):
                url = url[len(self._prefix):]
        return url or "/"

    # -- History --

    @property
    def path(self) -> str | None:
        """The current entry, or None before the first navigation."""
        return self._entries[-1] if self._entries else None

    @property
    def history(self) -> tuple[str, ...]:
        return tuple(self._entries)

    def push(self, url: str) -> None:
        self._entries.append(url)

    def replace(self, url: str) -> None:
        if self._entries:
            self._entries[-1] = url
        else:
            self._entries.append(url)
