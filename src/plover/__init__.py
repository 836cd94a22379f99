"""Plover — a navigation service for hierarchical single-page app routers.

Request transitions by route name or URL, generate URLs, and ask which
routes are active, all through one small service object.

Basic usage::

    from plover import Route, Router, RouterService

    router = Router([
        Route("index", "/"),
        Route("blog", "/blog", query_params={"page": 1}),
        Route("blog.post", "/blog/{post_id:int}"),
    ])
    service = RouterService(router)

    await service.transition_to("blog.post", 7)
    service.is_active("blog")                 # True
    service.url_for("blog", {"query_params": {"page": 2}})   # "#/blog?page=2"
"""

__version__ = "0.1.0.dev0"
__all__ = [
    "DEFAULT_VALUE",
    "ConfigurationError",
    "NavigationService",
    "PloverError",
    "Route",
    "RouteRequest",
    "RouteResolver",
    "Router",
    "RouterConfig",
    "RouterService",
    "RouterState",
    "Transition",
    "TransitionAborted",
    "TransitionError",
    "URLTarget",
    "UnrecognizedRoute",
    "UnrecognizedURL",
    "extract_route_args",
    "resembles_url",
    "shallow_equal",
]

# name -> module that defines it
_LAZY_IMPORTS: dict[str, str] = {
    "DEFAULT_VALUE": "plover.routing.query",
    "ConfigurationError": "plover.errors",
    "NavigationService": "plover.service",
    "PloverError": "plover.errors",
    "Route": "plover.routing.route",
    "RouteRequest": "plover.routing.args",
    "RouteResolver": "plover.routing.protocol",
    "Router": "plover.routing.router",
    "RouterConfig": "plover.config",
    "RouterService": "plover.service",
    "RouterState": "plover.routing.protocol",
    "Transition": "plover.routing.transition",
    "TransitionAborted": "plover.errors",
    "TransitionError": "plover.errors",
    "URLTarget": "plover.routing.args",
    "UnrecognizedRoute": "plover.errors",
    "UnrecognizedURL": "plover.errors",
    "extract_route_args": "plover.routing.args",
    "resembles_url": "plover.routing.args",
    "shallow_equal": "plover.routing.query",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import plover`` fast while providing a clean top-level API.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    return getattr(importlib.import_module(module_name), name)
