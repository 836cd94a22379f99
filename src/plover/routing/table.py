"""Route table with trie-based path matching.

Routes are registered during setup and compiled into an immutable
lookup structure, indexed both by dotted name and by path.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from plover.errors import ConfigurationError
from plover.routing.params import CONVERTERS
from plover.routing.route import PathSegment, Route, RouteMatch

_FLASK_STYLE = re.compile(r"<[^>]*>")


def parse_path(path: str) -> list[PathSegment]:
    """Parse a route path string into segments.

    Examples::

        "/blog"                -> [PathSegment("blog")]
        "/blog/{post_id}"      -> [PathSegment("blog"), PathSegment("{post_id}", is_param=True, ...)]
        "/blog/{post_id:int}"  -> [..., PathSegment("{post_id:int}", is_param=True, param_type="int")]
        "/files/{rest:path}"   -> [..., PathSegment("{rest:path}", is_param=True, param_type="path")]

    Raises ``ConfigurationError`` for ``<param>`` placeholders and for
    unknown converter types.
    """
    if _FLASK_STYLE.search(path):
        msg = (
            f"Route path {path!r} uses <param> placeholders. "
            "Plover expects {param} segments, e.g. '/blog/{post_id}'."
        )
        raise ConfigurationError(msg)

    segments: list[PathSegment] = []
    for part in path.strip("/").split("/"):
        if not part:
            continue
        if part.startswith("{") and part.endswith("}"):
            inner = part[1:-1]
            if ":" in inner:
                param_name, param_type = inner.split(":", 1)
            else:
                param_name = inner
                param_type = "str"
            if param_type not in CONVERTERS:
                msg = f"Unknown converter {param_type!r} in route path {path!r}."
                raise ConfigurationError(msg)
            segments.append(
                PathSegment(
                    value=part,
                    is_param=True,
                    param_name=param_name,
                    param_type=param_type,
                )
            )
        else:
            segments.append(PathSegment(value=part))
    return segments


class _TrieNode:
    """A node in the path trie. Mutable during compilation only."""

    __slots__ = ("catch_all", "children", "param_child", "route")

    def __init__(self) -> None:
        # Static segment children: "blog" -> node
        self.children: dict[str, _TrieNode] = {}
        # Single parameter child (only one param pattern per level)
        self.param_child: _ParamEdge | None = None
        # Catch-all edge (path converter)
        self.catch_all: _CatchAllEdge | None = None
        # Leaf route terminating at this node
        self.route: Route | None = None


@dataclass(slots=True)
class _ParamEdge:
    """A parameter edge in the trie."""

    param_name: str
    param_type: str
    regex: re.Pattern[str]
    node: _TrieNode


@dataclass(slots=True)
class _CatchAllEdge:
    """A catch-all (path) edge. Consumes the remaining path."""

    param_name: str
    route: Route


def _is_ancestor(ancestor: str, name: str) -> bool:
    return name.startswith(ancestor + ".")


class RouteTable:
    """Named routes plus a compiled path trie.

    Usage::

        table = RouteTable()
        table.add(Route("index", "/"))
        table.add(Route("blog", "/blog"))
        table.add(Route("blog.post", "/blog/{post_id}"))
        table.compile()
        table.match("/blog/7").route.name  # "blog.post"
        table.resolve_leaf("blog").name    # "blog.index"
    """

    __slots__ = ("_by_name", "_compiled", "_root", "_segments")

    def __init__(self, routes: Iterable[Route] = ()) -> None:
        self._root = _TrieNode()
        self._compiled = False
        self._by_name: dict[str, Route] = {}
        self._segments: dict[str, list[PathSegment]] = {}
        for route in routes:
            self.add(route)

    def add(self, route: Route) -> None:
        """Register a route. Must be called before compile()."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise ConfigurationError(msg)
        if not route.name:
            msg = f"Route for path {route.path!r} has an empty name."
            raise ConfigurationError(msg)
        if route.name in self._by_name:
            msg = f"Route {route.name!r} is already registered."
            raise ConfigurationError(msg)
        self._segments[route.name] = parse_path(route.path)
        self._by_name[route.name] = route

    @property
    def routes(self) -> list[Route]:
        """Return all registered routes in registration order."""
        return list(self._by_name.values())

    def compile(self) -> None:
        """Add implicit index routes, build the trie and freeze the table.

        A route with children and no explicit ``<name>.index`` child gets
        an implicit index route at its own path.
        """
        if self._compiled:
            return
        parents = {self.parent_of(name) for name in self._by_name} - {None}
        for parent in sorted(parents):
            index_name = f"{parent}.index"
            if index_name not in self._by_name:
                route = self._by_name[parent]
                self.add(Route(name=index_name, path=route.path, implicit=True))

        for route in self._by_name.values():
            self._insert(route)
        self._compiled = True

    def _insert(self, route: Route) -> None:
        node = self._root
        for seg in self._segments[route.name]:
            if seg.is_param and seg.param_type == "path":
                # Catch-all: consumes rest of path, must be last segment
                if node.catch_all is None:
                    node.catch_all = _CatchAllEdge(
                        param_name=seg.param_name or "path", route=route,
                    )
                else:
                    node.catch_all.route = self._pick(node.catch_all.route, route)
                return

            if seg.is_param:
                if node.param_child is None:
                    pattern, _ = CONVERTERS[seg.param_type]
                    node.param_child = _ParamEdge(
                        param_name=seg.param_name or "",
                        param_type=seg.param_type,
                        regex=re.compile(f"^{pattern}$"),
                        node=_TrieNode(),
                    )
                node = node.param_child.node
            else:
                if seg.value not in node.children:
                    node.children[seg.value] = _TrieNode()
                node = node.children[seg.value]

        node.route = route if node.route is None else self._pick(node.route, route)

    @staticmethod
    def _pick(existing: Route, incoming: Route) -> Route:
        """Choose the leaf when a parent and its descendant share a path."""
        if _is_ancestor(existing.name, incoming.name):
            return incoming
        if _is_ancestor(incoming.name, existing.name):
            return existing
        msg = (
            f"Routes {existing.name!r} and {incoming.name!r} "
            f"both match path {incoming.path!r}."
        )
        raise ConfigurationError(msg)

    # -- Name lookups --

    def get(self, name: str) -> Route | None:
        """Return the route registered as *name*, or None."""
        return self._by_name.get(name)

    def parent_of(self, name: str) -> str | None:
        """Return the longest registered dotted prefix of *name*."""
        head, sep, _ = name.rpartition(".")
        while sep:
            if head in self._by_name:
                return head
            head, sep, _ = head.rpartition(".")
        return None

    def resolve_leaf(self, name: str) -> Route | None:
        """Return the route a transition to *name* lands on.

        Parent routes resolve to their index child.
        """
        return self._by_name.get(f"{name}.index") or self._by_name.get(name)

    def chain(self, name: str) -> list[Route]:
        """Return *name* and its registered ancestors, outermost first."""
        result: list[Route] = []
        current: str | None = name
        while current is not None:
            result.append(self._by_name[current])
            current = self.parent_of(current)
        result.reverse()
        return result

    def segments(self, name: str) -> list[PathSegment]:
        """Return the parsed path segments of route *name*."""
        return self._segments[name]

    def param_segments(self, name: str) -> list[PathSegment]:
        """Return the dynamic segments of route *name*, in path order."""
        return [seg for seg in self._segments[name] if seg.is_param]

    def query_param_defaults(self, name: str) -> dict[str, tuple[str, Any]]:
        """Map each query parameter declared along *name*'s chain to
        ``(owning route name, default value)``. Inner routes win.
        """
        declared: dict[str, tuple[str, Any]] = {}
        for route in self.chain(name):
            for key, default in route.query_params.items():
                declared[key] = (route.name, default)
        return declared

    # -- Path matching --

    def match(self, path: str) -> RouteMatch | None:
        """Match a URL path against the compiled trie.

        Returns a ``RouteMatch`` on success, None when nothing matches.
        """
        if not self._compiled:
            msg = "Route table must be compiled before matching."
            raise ConfigurationError(msg)
        parts = [p for p in path.strip("/").split("/") if p]
        result = self._match_node(self._root, parts, 0, {})
        if result is None:
            return None
        route, params = result
        return RouteMatch(route=route, path_params=params)

    def _match_node(
        self,
        node: _TrieNode,
        parts: list[str],
        index: int,
        params: dict[str, str],
    ) -> tuple[Route, dict[str, str]] | None:
        """Recursively match path parts against the trie."""
        # All parts consumed, return this node's route
        if index == len(parts):
            if node.route is not None:
                return node.route, params
            return None

        part = parts[index]

        # 1. Try static child first (exact match)
        if part in node.children:
            result = self._match_node(node.children[part], parts, index + 1, params)
            if result is not None:
                return result

        # 2. Try parameter child
        if node.param_child is not None:
            edge = node.param_child
            if edge.regex.match(part):
                new_params = {**params, edge.param_name: part}
                result = self._match_node(edge.node, parts, index + 1, new_params)
                if result is not None:
                    return result

        # 3. Try catch-all
        if node.catch_all is not None:
            remaining = "/".join(parts[index:])
            return node.catch_all.route, {**params, node.catch_all.param_name: remaining}

        return None
