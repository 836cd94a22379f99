"""Route, PathSegment and RouteMatch frozen dataclasses."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from plover._internal.types import ModelHook


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route path.

    Static:  ``/blog``  (is_param=False)
    Param:   ``/{post_id}``   (is_param=True, param_name="post_id")
    Typed:   ``/{post_id:int}`` (is_param=True, param_name="post_id", param_type="int")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    param_type: str = "str"


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    ``name`` is the dot-separated logical name (``"blog.post"``); its
    parent is the longest registered dotted prefix. ``path`` is the full
    path pattern, parent segments included. ``query_params`` declares the
    query parameters the route owns and their default values.
    """

    name: str
    path: str
    query_params: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    model: ModelHook | None = None
    implicit: bool = False

    @property
    def parent_name(self) -> str | None:
        """Dotted prefix of ``name``, or None for a top-level route."""
        head, sep, _ = self.name.rpartition(".")
        return head if sep else None


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful path match."""

    route: Route
    path_params: dict[str, str]
