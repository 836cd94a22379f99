"""Resolver protocol — the narrow surface ``RouterService`` depends on.

Any object with this shape can back a ``RouterService``. No base class
required; the service checks the shape, not the lineage. Plover ships
one implementation, ``plover.routing.router.Router``.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Protocol, Self

from plover._internal.types import Model, QueryParamMap


def _frozen_empty() -> Mapping[str, Any]:
    return MappingProxyType({})


@dataclass(frozen=True, slots=True)
class RouterState:
    """The settled navigational state.

    Replaced wholesale on every committed transition, never mutated.
    """

    route_name: str | None = None
    params: Mapping[str, str] = field(default_factory=_frozen_empty)
    query_params: Mapping[str, Any] = field(default_factory=_frozen_empty)
    models: Mapping[str, Any] = field(default_factory=_frozen_empty)
    url: str | None = None


class TransitionHandle(Protocol):
    """What the service touches on a transition returned by a resolver."""

    keep_default_query_param_values: bool

    def method(self, kind: str | None) -> Self: ...


class RouteResolver(Protocol):
    """Protocol for the route resolver / transition engine.

    Read-only attributes are recomputed by the resolver whenever the
    settled state changes.
    """

    @property
    def state(self) -> RouterState: ...

    @property
    def current_route_name(self) -> str | None: ...

    @property
    def current_url(self) -> str | None: ...

    @property
    def location(self) -> str: ...

    @property
    def root_url(self) -> str: ...

    def do_url_transition(self, kind: str, url: str) -> TransitionHandle: ...

    def do_transition(
        self,
        route_name: str,
        models: Sequence[Model],
        query_params: QueryParamMap,
        from_facade: bool = False,
    ) -> TransitionHandle: ...

    def generate(self, route_name: str, *args: Any) -> str: ...

    def is_active_intent(
        self,
        route_name: str,
        models: Sequence[Model],
        reserved: None = None,
    ) -> bool: ...

    def prepare_query_params(
        self,
        route_name: str,
        models: Sequence[Model],
        query_params: dict[str, Any],
        from_facade: bool = False,
    ) -> None: ...
