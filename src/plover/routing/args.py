"""Navigation targets and argument normalization.

Every public navigation call uses the same variadic convention::

    service.transition_to("blog.post", post, {"query_params": {"page": 2}})
    service.transition_to("/blog/1?page=2")

The first argument is a route name (or, for transitions only, a URL),
followed by positional models and an optional trailing options hash.
The options hash is recognized by the presence of a ``query_params``
key, never by position or argument count. A plain mapping without that
key is itself a model.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from plover._internal.types import Model, QueryParamMap

QUERY_PARAMS_KEY = "query_params"


def _empty_query_params() -> QueryParamMap:
    return MappingProxyType({})


@dataclass(frozen=True, slots=True)
class RouteRequest:
    """A name-based navigation request.

    ``models`` are matched positionally against the dynamic segments of
    ``route_name``, outermost ancestor first, innermost route last.
    """

    route_name: str
    models: tuple[Model, ...] = ()
    query_params: QueryParamMap = field(default_factory=_empty_query_params)

    def to_args(self) -> tuple[Any, ...]:
        """Rebuild the variadic call that produces this request."""
        if self.query_params:
            options = {QUERY_PARAMS_KEY: dict(self.query_params)}
            return (self.route_name, *self.models, options)
        return (self.route_name, *self.models)


@dataclass(frozen=True, slots=True)
class URLTarget:
    """A literal URL navigation target."""

    url: str


# Exactly one variant per call, decided before any resolution happens
NavigationTarget = RouteRequest | URLTarget


def is_options_hash(value: object) -> bool:
    """Return True if *value* is an options hash (has ``query_params``)."""
    return isinstance(value, Mapping) and QUERY_PARAMS_KEY in value


def extract_route_args(args: Sequence[Any]) -> RouteRequest:
    """Split ``(route_name, *models, options?)`` into a ``RouteRequest``.

    The route name is taken as-is; a missing or malformed name fails
    downstream in the resolver, not here.

    Examples::

        extract_route_args(["blog.index"])
        # RouteRequest("blog.index", (), {})

        extract_route_args(["blog.post", 1, {"query_params": {"page": 2}}])
        # RouteRequest("blog.post", (1,), {"page": 2})

        extract_route_args(["blog.post", {"id": 1}])
        # RouteRequest("blog.post", ({"id": 1},), {})
    """
    route_name, *rest = args
    query_params: dict[str, Any] = {}
    if rest and is_options_hash(rest[-1]):
        options = rest.pop()
        query_params = dict(options[QUERY_PARAMS_KEY] or {})
    return RouteRequest(
        route_name=route_name,
        models=tuple(rest),
        query_params=MappingProxyType(query_params),
    )


def resembles_url(value: object) -> bool:
    """Check whether *value* looks like a literal URL rather than a route name.

    A URL is an empty string, or a string starting with ``/`` (which
    includes protocol-relative ``//host/...``) or ``#``::

        >>> resembles_url("/about")
        True
        >>> resembles_url("#/about")
        True
        >>> resembles_url("//cdn/x")
        True
        >>> resembles_url("blog.post")
        False
    """
    if not isinstance(value, str):
        return False
    return value == "" or value[0] in "/#"


def classify_target(args: Sequence[Any]) -> NavigationTarget:
    """Classify a transition call as a URL or a route request.

    Only transitions accept URLs; ``url_for`` and ``is_active`` always
    treat their first argument as a route name.
    """
    if args and resembles_url(args[0]):
        return URLTarget(url=args[0])
    return extract_route_args(args)
