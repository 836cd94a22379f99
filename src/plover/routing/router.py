"""Reference route resolver and transition engine.

``Router`` implements the ``RouteResolver`` protocol over an in-memory
``RouteTable`` and ``Location``. It is what a ``RouterService`` is
normally constructed with::

    router = Router(
        [
            Route("index", "/"),
            Route("blog", "/blog", query_params={"page": 1}),
            Route("blog.post", "/blog/{post_id:int}", model=load_post),
        ],
        config=RouterConfig(location="history"),
    )
    await router.start("/")

Query-parameter preparation has two modes. Requests coming from the
router service (``from_facade=True``) keep every value as given, while
internal requests prune values equal to the declared default.
"""

import inspect
import logging
from collections.abc import Iterable, Mapping, Sequence
from types import MappingProxyType
from typing import Any
from urllib.parse import quote, unquote

import anyio

from plover._internal.types import Model, QueryParamMap
from plover.config import RouterConfig
from plover.errors import (
    TransitionAborted,
    TransitionError,
    UnrecognizedRoute,
    UnrecognizedURL,
)
from plover.routing.args import extract_route_args
from plover.routing.location import Location
from plover.routing.params import convert_param, param_matches
from plover.routing.protocol import RouterState
from plover.routing.query import (
    DEFAULT_VALUE,
    coerce_like,
    decode_query,
    encode_query,
    shallow_equal,
)
from plover.routing.route import PathSegment, Route
from plover.routing.table import RouteTable
from plover.routing.transition import Transition

logger = logging.getLogger("plover.router")

_SCALARS = (str, int, float)

# Transition kinds accepted by do_url_transition
URL_TRANSITION_KINDS: dict[str, str] = {
    "transition_to": "push",
    "replace_with": "replace",
}


def serialize_model(model: Model, param_name: str) -> str:
    """Turn a model or identifier into the string for a dynamic segment.

    Scalars are used as-is. Mappings and objects are looked up by the
    segment's param name, falling back to ``id``.
    """
    if isinstance(model, bool):
        return "true" if model else "false"
    if isinstance(model, _SCALARS):
        return str(model)
    if isinstance(model, Mapping):
        value = model.get(param_name, model.get("id"))
    else:
        value = getattr(model, param_name, getattr(model, "id", None))
    if value is None:
        msg = f"Cannot serialize {model!r} for dynamic segment {param_name!r}."
        raise ValueError(msg)
    return str(value)


class Router:
    """In-memory route resolver, transition engine and URL generator."""

    __slots__ = ("_active_transition", "_config", "_location", "_state", "_table")

    def __init__(
        self,
        routes: Iterable[Route] | RouteTable = (),
        *,
        config: RouterConfig | None = None,
    ) -> None:
        self._config = config or RouterConfig()
        self._location = Location(self._config.location, self._config.root_url)
        self._table = routes if isinstance(routes, RouteTable) else RouteTable(routes)
        self._table.compile()
        self._state = RouterState()
        self._active_transition: Transition | None = None

    # -- Read-only state --

    @property
    def config(self) -> RouterConfig:
        return self._config

    @property
    def table(self) -> RouteTable:
        return self._table

    @property
    def state(self) -> RouterState:
        return self._state

    @property
    def current_route_name(self) -> str | None:
        return self._state.route_name

    @property
    def current_url(self) -> str | None:
        return self._state.url

    @property
    def location(self) -> str:
        return self._location.mode

    @property
    def root_url(self) -> str:
        return self._location.root_url

    @property
    def history(self) -> tuple[str, ...]:
        """Formatted URLs recorded by the location, oldest first."""
        return self._location.history

    @property
    def active_transition(self) -> Transition | None:
        """The most recent transition that has not settled, if any."""
        transition = self._active_transition
        if transition is not None and transition.is_pending:
            return transition
        return None

    async def start(self, url: str = "/") -> RouterState:
        """Perform the initial URL transition."""
        return await self.do_url_transition("transition_to", url)

    # -- Transitions --

    def do_transition(
        self,
        route_name: str,
        models: Sequence[Model],
        query_params: QueryParamMap,
        from_facade: bool = False,
    ) -> Transition:
        """Begin a name-based transition. Never raises for bad targets.

        An unknown route name, or models that do not fit the route's
        dynamic segments, produce a transition that fails when awaited.
        """
        leaf = self._table.resolve_leaf(route_name) if isinstance(route_name, str) else None
        if leaf is None:
            return self._failed(UnrecognizedRoute(str(route_name)))
        try:
            params = self._fill_params(leaf.name, models)
        except ValueError as exc:
            return self._failed(TransitionError(str(exc)))

        prepared = dict(query_params)
        self.prepare_query_params(route_name, models, prepared, from_facade)
        transition = Transition(
            self._settle,
            target_name=leaf.name,
            params=params,
            query_params=prepared,
            supplied_query_params=frozenset(
                key for key, value in query_params.items() if value is not DEFAULT_VALUE
            ),
            models=self._supplied_models(leaf.name, models),
        )
        return self._begin(transition)

    def do_url_transition(self, kind: str, url: str) -> Transition:
        """Begin a transition to a literal URL.

        *kind* is ``"transition_to"`` or ``"replace_with"``.
        """
        if kind not in URL_TRANSITION_KINDS:
            msg = f"Unknown transition kind {kind!r}."
            raise ValueError(msg)
        router_url = self._location.strip_url(url)
        path, _, query_string = router_url.partition("?")
        match = self._table.match(path)
        if match is None:
            return self._failed(UnrecognizedURL(url))

        params = {name: unquote(value) for name, value in match.path_params.items()}
        declared = self._table.query_param_defaults(match.route.name)
        query_params: dict[str, Any] = {}
        for key, value in decode_query(query_string).items():
            if key in declared:
                value = coerce_like(value, declared[key][1])
            query_params[key] = value

        transition = Transition(
            self._settle,
            target_name=match.route.name,
            params=params,
            query_params=query_params,
            supplied_query_params=frozenset(query_params),
            url=router_url,
        )
        transition.method(URL_TRANSITION_KINDS[kind])
        return self._begin(transition)

    def _failed(self, error: TransitionError) -> Transition:
        logger.debug("Transition failed before starting: %s", error)
        return Transition(self._settle, error=error)

    def _begin(self, transition: Transition) -> Transition:
        previous = self.active_transition
        if previous is not None:
            previous.abort()
        self._active_transition = transition
        logger.debug("Started %r", transition)
        return transition

    async def _settle(self, transition: Transition) -> RouterState:
        assert transition.target_name is not None
        models = await self._resolve_models(transition)
        if transition.is_aborted or transition is not self._active_transition:
            raise TransitionAborted(f"Transition to {transition.target_name!r} was superseded")
        return self._commit(transition, models)

    async def _resolve_models(self, transition: Transition) -> dict[str, Any]:
        """Run model hooks along the target chain concurrently."""
        assert transition.target_name is not None
        resolved: dict[str, Any] = dict(transition.models)
        pending: dict[str, Any] = {}
        query_params = self._full_query_params(transition)

        for route in self._table.chain(transition.target_name):
            if route.name in resolved or route.model is None:
                continue
            params = {
                seg.param_name: convert_param(transition.params[seg.param_name], seg.param_type)
                for seg in self._table.param_segments(route.name)
                if seg.param_name in transition.params
            }
            value = route.model(params, dict(query_params))
            if inspect.isawaitable(value):
                pending[route.name] = value
            else:
                resolved[route.name] = value

        if pending:
            async def _resolve(name: str, awaitable: Any) -> None:
                resolved[name] = await awaitable

            try:
                async with anyio.create_task_group() as tg:
                    for name, awaitable in pending.items():
                        tg.start_soon(_resolve, name, awaitable)
            except ExceptionGroup as group:
                # A single failing hook surfaces as itself, like a sync hook
                if len(group.exceptions) == 1:
                    raise group.exceptions[0] from None
                raise
        return resolved

    def _commit(self, transition: Transition, models: dict[str, Any]) -> RouterState:
        assert transition.target_name is not None
        name = transition.target_name
        declared = self._table.query_param_defaults(name)
        query_params = self._full_query_params(transition)

        url = transition.url
        if url is None:
            url = self._build_path(name, transition.params)
            query_string = encode_query(self._url_query_params(transition, declared))
            if query_string:
                url = f"{url}?{query_string}"

        self._state = RouterState(
            route_name=name,
            params=MappingProxyType(dict(transition.params)),
            query_params=MappingProxyType(query_params),
            models=MappingProxyType(models),
            url=url,
        )
        if transition.url_method == "replace":
            self._location.replace(self._location.format_url(url))
        elif transition.url_method == "push":
            self._location.push(self._location.format_url(url))
        self._active_transition = None

        log = logger.info if self._config.log_transitions else logger.debug
        log("Transitioned to %s (%s)", name, url)
        return self._state

    def _full_query_params(self, transition: Transition) -> dict[str, Any]:
        """Declared defaults for the target chain overlaid by the transition's values."""
        assert transition.target_name is not None
        declared = self._table.query_param_defaults(transition.target_name)
        query_params = {key: default for key, (_, default) in declared.items()}
        query_params.update(transition.query_params)
        return query_params

    @staticmethod
    def _url_query_params(
        transition: Transition,
        declared: dict[str, tuple[str, Any]],
    ) -> dict[str, Any]:
        """Query params written to the committed URL.

        Default-valued params are dropped unless the caller supplied them
        and the transition keeps default values.
        """
        result: dict[str, Any] = {}
        for key, value in transition.query_params.items():
            if key in declared and shallow_equal({key: value}, {key: declared[key][1]}):
                keep = (
                    transition.keep_default_query_param_values
                    and key in transition.supplied_query_params
                )
                if not keep:
                    continue
            result[key] = value
        return result

    # -- Query params --

    def prepare_query_params(
        self,
        route_name: str,
        models: Sequence[Model],
        query_params: dict[str, Any],
        from_facade: bool = False,
    ) -> None:
        """Reconcile *query_params* in place against the route's declarations.

        - ``DEFAULT_VALUE`` entries become the declared default.
        - Supplied values are coerced to the type of the declared default.
        - Declared but unsupplied params are taken from the current state
          when their owning route is active, otherwise from the default.
        - Unless *from_facade*, params equal to their default are removed.
        """
        leaf = self._table.resolve_leaf(route_name) if isinstance(route_name, str) else None
        if leaf is None:
            return
        declared = self._table.query_param_defaults(leaf.name)

        for key, value in list(query_params.items()):
            if value is DEFAULT_VALUE:
                if key in declared:
                    query_params[key] = declared[key][1]
                else:
                    del query_params[key]
            elif key in declared:
                query_params[key] = coerce_like(value, declared[key][1])

        current = self._state
        for key, (owner, default) in declared.items():
            if key in query_params:
                continue
            if self._route_in_state(owner) and key in current.query_params:
                query_params[key] = current.query_params[key]
            else:
                query_params[key] = default

        if not from_facade:
            for key, (_, default) in declared.items():
                if shallow_equal({key: query_params[key]}, {key: default}):
                    del query_params[key]

    # -- Active state --

    def _route_in_state(self, route_name: str) -> bool:
        current = self._state.route_name
        if current is None:
            return False
        return current == route_name or current.startswith(route_name + ".")

    def is_active_intent(
        self,
        route_name: str,
        models: Sequence[Model],
        reserved: None = None,
    ) -> bool:
        """Return True if *route_name* with *models* is part of the current state.

        A parent route is active whenever one of its descendants is. Models
        are matched against the trailing dynamic segments of the route.
        *reserved* is accepted for interface compatibility and ignored.
        """
        if not isinstance(route_name, str) or self._table.get(route_name) is None:
            return False
        if not self._route_in_state(route_name):
            return False
        if not models:
            return True
        names = [seg.param_name for seg in self._table.param_segments(route_name)]
        if len(models) > len(names):
            return False
        current = self._state.params
        for name, model in zip(names[len(names) - len(models):], models, strict=True):
            try:
                if serialize_model(model, name) != current.get(name):
                    return False
            except ValueError:
                return False
        return True

    # -- URL generation --

    def generate(self, route_name: str, *args: Any) -> str:
        """Generate the location-formatted URL for a route.

        Every supplied query param appears in the URL, default-valued or
        not. ``DEFAULT_VALUE`` omits a param.

        Raises ``UnrecognizedRoute`` for an unknown name and ``ValueError``
        when the models do not fill the route's dynamic segments.
        """
        request = extract_route_args((route_name, *args))
        route = self._table.get(route_name) if isinstance(route_name, str) else None
        if route is None:
            raise UnrecognizedRoute(str(route_name))
        params = self._fill_params(route.name, request.models)
        url = self._build_path(route.name, params)
        query_string = encode_query(request.query_params)
        if query_string:
            url = f"{url}?{query_string}"
        return self._location.format_url(url)

    def _fill_params(self, route_name: str, models: Sequence[Model]) -> dict[str, str]:
        """Bind *models* to the route's dynamic segments, innermost last.

        Leading segments without a model are taken from the current state,
        but only when the route owning the segment is currently active.
        """
        segments = self._table.param_segments(route_name)
        if len(models) > len(segments):
            msg = (
                f"Route {route_name!r} has {len(segments)} dynamic segment(s), "
                f"got {len(models)} model(s)."
            )
            raise ValueError(msg)
        missing = segments[: len(segments) - len(models)]
        owners = self._segment_owners(route_name) if missing else {}
        params: dict[str, str] = {}
        for seg in missing:
            assert seg.param_name is not None
            owner = owners[seg.param_name]
            if not self._route_in_state(owner) or seg.param_name not in self._state.params:
                msg = f"No model given for dynamic segment {seg.param_name!r} of {route_name!r}."
                raise ValueError(msg)
            params[seg.param_name] = self._state.params[seg.param_name]
        for seg, model in zip(segments[len(missing):], models, strict=True):
            assert seg.param_name is not None
            value = serialize_model(model, seg.param_name)
            if not param_matches(value, seg.param_type):
                msg = f"{value!r} is not a valid {seg.param_type} for {seg.param_name!r}."
                raise ValueError(msg)
            params[seg.param_name] = value
        return params

    def _segment_owners(self, route_name: str) -> dict[str, str]:
        """Map each dynamic segment of *route_name* to the outermost route declaring it."""
        owners: dict[str, str] = {}
        for route in self._table.chain(route_name):
            for seg in self._table.param_segments(route.name):
                assert seg.param_name is not None
                owners.setdefault(seg.param_name, route.name)
        return owners

    def _supplied_models(self, route_name: str, models: Sequence[Model]) -> dict[str, Any]:
        """Map model objects (not plain identifiers) to the routes owning their segment."""
        owners = self._segment_owners(route_name)
        segments = self._table.param_segments(route_name)
        supplied: dict[str, Any] = {}
        for seg, model in zip(segments[len(segments) - len(models):], models, strict=True):
            if not isinstance(model, _SCALARS):
                assert seg.param_name is not None
                supplied[owners[seg.param_name]] = model
        return supplied

    def _build_path(self, route_name: str, params: Mapping[str, str]) -> str:
        parts: list[str] = []
        for seg in self._table.segments(route_name):
            parts.append(self._segment_value(seg, params))
        return "/" + "/".join(parts)

    @staticmethod
    def _segment_value(seg: PathSegment, params: Mapping[str, str]) -> str:
        if not seg.is_param:
            return seg.value
        assert seg.param_name is not None
        safe = "/" if seg.param_type == "path" else ""
        return quote(params[seg.param_name], safe=safe)
