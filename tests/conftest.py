"""Shared fixtures: a recording fake resolver and a sample reference router."""

from collections.abc import Sequence
from typing import Any

import pytest

from plover.config import RouterConfig
from plover.routing.protocol import RouterState
from plover.routing.route import Route
from plover.routing.router import Router
from plover.service import RouterService


class FakeTransition:
    """Stand-in transition that records what the service did to it."""

    def __init__(self, call: tuple[Any, ...]) -> None:
        self.call = call
        self.url_method: str | None = "push"
        self.keep_default_query_param_values = False

    def method(self, kind: str | None) -> "FakeTransition":
        self.url_method = kind
        return self


class FakeResolver:
    """Records every resolver call; answers from configurable fields."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []
        self.state = RouterState(route_name="blog.post", query_params={"page": 2})
        self.current_route_name = "blog.post"
        self.current_url = "/blog/7?page=2"
        self.location = "history"
        self.root_url = "/app/"
        self.active = True
        self.prepared: dict[str, Any] = {}

    def do_url_transition(self, kind: str, url: str) -> FakeTransition:
        self.calls.append(("do_url_transition", kind, url))
        return FakeTransition(self.calls[-1])

    def do_transition(
        self,
        route_name: str,
        models: Sequence[Any],
        query_params: Any,
        from_facade: bool = False,
    ) -> FakeTransition:
        self.calls.append(("do_transition", route_name, tuple(models), dict(query_params), from_facade))
        return FakeTransition(self.calls[-1])

    def generate(self, route_name: str, *args: Any) -> str:
        self.calls.append(("generate", route_name, *args))
        return f"/generated/{route_name}"

    def is_active_intent(self, route_name: str, models: Sequence[Any], reserved: None = None) -> bool:
        self.calls.append(("is_active_intent", route_name, tuple(models), reserved))
        return self.active

    def prepare_query_params(
        self,
        route_name: str,
        models: Sequence[Any],
        query_params: dict[str, Any],
        from_facade: bool = False,
    ) -> None:
        self.calls.append(("prepare_query_params", route_name, tuple(models), dict(query_params), from_facade))
        query_params.update(self.prepared)


@pytest.fixture
def resolver() -> FakeResolver:
    return FakeResolver()


@pytest.fixture
def fake_service(resolver: FakeResolver) -> RouterService:
    return RouterService(resolver)


def sample_routes() -> list[Route]:
    return [
        Route("index", "/", query_params={"page": 0}),
        Route("about", "/about"),
        Route("blog", "/blog", query_params={"page": 1, "sort": "new"}),
        Route("blog.post", "/blog/{post_id:int}"),
        Route("user", "/users/{user_id}"),
        Route("user.post", "/users/{user_id}/posts/{post_id}"),
    ]


def make_router(**config: Any) -> Router:
    return Router(sample_routes(), config=RouterConfig(**config))


@pytest.fixture
def router() -> Router:
    return make_router()


@pytest.fixture
def service(router: Router) -> RouterService:
    return RouterService(router)


@pytest.fixture
def router_factory() -> Any:
    return make_router
