"""Router service — the public navigation API.

Gives application code access to the router without reaching into it::

    service = RouterService(router)

    await service.transition_to("blog.post", post, {"query_params": {"page": 2}})
    await service.replace_with("/about")
    service.url_for("blog.post", 7)                     # "#/blog/7"
    service.is_active("blog", {"query_params": {"page": 2}})

All four methods share one call convention: a route name (or, for
transitions, a URL), positional models, and an optional trailing options
hash with a ``query_params`` key.
"""

import logging
from typing import Any, Protocol

from plover.routing.args import URLTarget, classify_target, extract_route_args
from plover.routing.protocol import RouteResolver, TransitionHandle
from plover.routing.query import shallow_equal

logger = logging.getLogger("plover.service")


class NavigationService(Protocol):
    """Protocol for the public navigation API."""

    @property
    def current_route_name(self) -> str | None: ...

    @property
    def current_url(self) -> str | None: ...

    @property
    def location(self) -> str: ...

    @property
    def root_url(self) -> str: ...

    def transition_to(self, *args: Any) -> TransitionHandle: ...

    def replace_with(self, *args: Any) -> TransitionHandle: ...

    def url_for(self, *args: Any) -> str: ...

    def is_active(self, *args: Any) -> bool: ...


class RouterService:
    """Navigation facade over an injected ``RouteResolver``.

    Holds no state of its own. The resolver is fixed at construction.
    """

    __slots__ = ("_router",)

    def __init__(self, router: RouteResolver) -> None:
        self._router = router

    def __repr__(self) -> str:
        return f"<RouterService {self.current_route_name!r}>"

    @property
    def router(self) -> RouteResolver:
        return self._router

    # -- Current state --

    @property
    def current_route_name(self) -> str | None:
        """Dotted name of the current leaf route.

        For a router with ``blog`` and ``blog.post`` routes this is
        ``"index"`` at ``/``, ``"blog.index"`` at ``/blog`` and
        ``"blog.post"`` at ``/blog/7``.
        """
        return self._router.current_route_name

    @property
    def current_url(self) -> str | None:
        """Path of the current state, e.g. ``"/blog/7?page=2"``."""
        return self._router.current_url

    @property
    def location(self) -> str:
        """Location mode: ``"auto"``, ``"hash"``, ``"history"`` or ``"none"``."""
        return self._router.location

    @property
    def root_url(self) -> str:
        """Prefix assumed on every route path, ``"/"`` by default."""
        return self._router.root_url

    # -- Navigation --

    def transition_to(self, *args: Any) -> TransitionHandle:
        """Transition to a route name or a URL.

        ``transition_to("/blog/7")`` goes through URL matching;
        ``transition_to("blog.post", 7, {"query_params": {...}})`` is
        name-based. Returns the transition immediately; it settles when
        awaited. Unknown routes never raise here, the transition fails
        instead.

        Default-valued query params passed here are kept in the URL
        rather than recomputed from route defaults.
        """
        target = classify_target(args)
        if isinstance(target, URLTarget):
            logger.debug("transition_to URL %r", target.url)
            return self._router.do_url_transition("transition_to", target.url)

        logger.debug("transition_to route %r", target.route_name)
        transition = self._router.do_transition(
            target.route_name,
            target.models,
            target.query_params,
            True,
        )
        transition.keep_default_query_param_values = True
        return transition

    def replace_with(self, *args: Any) -> TransitionHandle:
        """Like ``transition_to`` but replaces the current history entry."""
        return self.transition_to(*args).method("replace")

    def url_for(self, *args: Any) -> str:
        """Generate a URL for ``(route_name, *models, options?)``.

        Every query param passed appears in the URL, even when it equals
        the route's default: ``url_for("index", {"query_params": {"page": 0}})``
        gives ``/?page=0``. Pass ``DEFAULT_VALUE`` to leave a param out.
        """
        return self._router.generate(*args)

    def is_active(self, *args: Any) -> bool:
        """Return True if the route, models and query params are current.

        Without query params only the route and models are checked. With
        query params, every one of them must match the current state once
        unsupplied params are filled in the way a transition would.
        """
        request = extract_route_args(args)
        if not self._router.is_active_intent(request.route_name, request.models, None):
            return False
        if not request.query_params:
            return True

        query_params = dict(request.query_params)
        self._router.prepare_query_params(
            request.route_name,
            request.models,
            query_params,
            True,
        )
        return shallow_equal(query_params, self._router.state.query_params)
