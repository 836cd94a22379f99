"""Plover exception hierarchy.

Shared across the route table, the resolver, transitions, and the
router service so every module raises and catches the same types.
"""

from dataclasses import dataclass


class PloverError(Exception):
    """Base for all plover-specific errors."""


class ConfigurationError(PloverError):
    """Raised when router configuration or the route table is invalid.

    Typically raised while the ``Router`` is being constructed.
    """


@dataclass(frozen=True, slots=True)
class TransitionError(PloverError):
    """A transition that could not settle.

    Never raised synchronously by ``RouterService.transition_to``; the
    failure is stored on the transition and raised when it is awaited.
    """

    detail: str = ""

    def __str__(self) -> str:
        return self.detail or type(self).__name__


class UnrecognizedRoute(TransitionError):  # noqa: N818
    """No route is registered under the requested name."""

    def __init__(self, route_name: str, detail: str = "") -> None:
        super().__init__(detail=detail or f"There is no route named {route_name!r}")


class UnrecognizedURL(TransitionError):  # noqa: N818
    """A literal URL matched no registered route."""

    def __init__(self, url: str, detail: str = "") -> None:
        super().__init__(detail=detail or f"No route matches URL {url!r}")


class TransitionAborted(TransitionError):  # noqa: N818
    """The transition was superseded by a newer one or aborted explicitly."""

    def __init__(self, detail: str = "Transition aborted") -> None:
        super().__init__(detail=detail)
