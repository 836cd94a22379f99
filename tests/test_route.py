"""Tests for plover.routing.route — Route, RouteMatch, PathSegment."""

import pytest

from plover.routing.route import PathSegment, Route, RouteMatch


class TestPathSegment:
    def test_static(self) -> None:
        seg = PathSegment(value="blog")
        assert seg.value == "blog"
        assert seg.is_param is False
        assert seg.param_name is None
        assert seg.param_type == "str"

    def test_param(self) -> None:
        seg = PathSegment(value="{post_id:int}", is_param=True, param_name="post_id", param_type="int")
        assert seg.is_param is True
        assert seg.param_name == "post_id"
        assert seg.param_type == "int"

    def test_frozen(self) -> None:
        seg = PathSegment(value="blog")
        with pytest.raises(AttributeError):
            seg.value = "other"  # type: ignore[misc]


class TestRoute:
    def test_creation(self) -> None:
        route = Route(name="blog.post", path="/blog/{post_id}")
        assert route.name == "blog.post"
        assert route.path == "/blog/{post_id}"
        assert dict(route.query_params) == {}
        assert route.model is None
        assert route.implicit is False

    def test_query_param_defaults(self) -> None:
        route = Route(name="blog", path="/blog", query_params={"page": 1})
        assert route.query_params["page"] == 1

    def test_parent_name(self) -> None:
        assert Route(name="blog.post.comments", path="/x").parent_name == "blog.post"
        assert Route(name="blog", path="/blog").parent_name is None

    def test_frozen(self) -> None:
        route = Route(name="index", path="/")
        with pytest.raises(AttributeError):
            route.path = "/other"  # type: ignore[misc]


class TestRouteMatch:
    def test_creation(self) -> None:
        route = Route(name="blog.post", path="/blog/{post_id}")
        match = RouteMatch(route=route, path_params={"post_id": "7"})
        assert match.route is route
        assert match.path_params == {"post_id": "7"}
