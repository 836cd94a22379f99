"""Router configuration.

RouterConfig is a frozen dataclass: immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass

# Location modes understood by ``plover.routing.location.Location``
LOCATION_MODES: frozenset[str] = frozenset({"auto", "hash", "history", "none"})


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RouterConfig(location="history", root_url="/my-root/")
    """

    # How URLs are written: "auto", "hash", "history" or "none"
    location: str = "hash"

    # Prefix assumed on every route path (history/auto locations only)
    root_url: str = "/"

    # Log transition commits at INFO instead of DEBUG
    log_transitions: bool = False
